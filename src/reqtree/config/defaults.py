"""
reqtree.config.defaults - Built-in configuration values.

Every key read by the filter panel has a default here so that a project
without a ``.reqtree.toml`` still gets a working panel.
"""

DEFAULT_CONFIG = {
    "tree_filter": {
        "requirements": {
            "show_filters": True,
            "advanced_filter_mode_choice": True,
            # > 0 means "refresh tree on action" starts checked
            "automatic_tree_refresh": 1,
            "filter_doc_id": True,
            "filter_title": True,
            "filter_status": True,
            "filter_type": True,
            "filter_spec_type": True,
            "filter_coverage": False,
            "filter_relation": True,
            "filter_tc_id": True,
            "filter_custom_fields": True,
        },
    },
    "requirements": {
        "expected_coverage_management": False,
        "status_labels": {
            "D": "req_status_draft",
            "R": "req_status_review",
            "W": "req_status_rework",
            "F": "req_status_finish",
            "I": "req_status_implemented",
            "V": "review_status_valid",
            "N": "req_status_not_testable",
            "O": "req_status_obsolete",
        },
        "type_labels": {
            "1": "req_type_info",
            "2": "req_type_feature",
            "3": "req_type_use_case",
            "4": "req_type_interface",
            "5": "req_type_non_functional",
            "6": "req_type_constrain",
            "7": "req_type_system_function",
        },
        "relations": {
            "enable": True,
            "types": [
                {
                    "id": 1,
                    "source_label": "req_rel_parent_of",
                    "destination_label": "req_rel_child_of",
                },
                {
                    "id": 2,
                    "source_label": "req_rel_blocks",
                    "destination_label": "req_rel_depends",
                },
                {
                    "id": 3,
                    "source_label": "req_rel_related_to",
                    "destination_label": "req_rel_related_to",
                },
            ],
        },
    },
    "requirement_specs": {
        "type_labels": {
            "1": "req_spec_type_section",
            "2": "req_spec_type_user_req_spec",
            "3": "req_spec_type_system_req_spec",
        },
    },
    "testcase": {
        "glue_character": "-",
    },
    "locales": {
        "default": "en_GB",
        "date_formats": {
            "en_GB": "%d/%m/%Y",
            "en_US": "%m/%d/%Y",
            "de_DE": "%d.%m.%Y",
            "fr_FR": "%d/%m/%Y",
            "it_IT": "%d/%m/%Y",
            "es_ES": "%d/%m/%Y",
            "nl_NL": "%d-%m-%Y",
            "pt_BR": "%d/%m/%Y",
            "ja_JP": "%Y/%m/%d",
            "zh_CN": "%Y-%m-%d",
        },
    },
    "labels": {
        "en_GB": {
            "any": "[Any]",
            "btn_show_cf": "Show Custom Fields",
            "btn_hide_cf": "Hide Custom Fields",
            "req_status_draft": "Draft",
            "req_status_review": "Review",
            "req_status_rework": "Rework",
            "req_status_finish": "Finish",
            "req_status_implemented": "Implemented",
            "review_status_valid": "Valid",
            "req_status_not_testable": "Not testable",
            "req_status_obsolete": "Obsolete",
            "req_type_info": "Informational",
            "req_type_feature": "Feature",
            "req_type_use_case": "Use case",
            "req_type_interface": "User interface",
            "req_type_non_functional": "Non functional",
            "req_type_constrain": "Constraint",
            "req_type_system_function": "System function",
            "req_spec_type_section": "Section",
            "req_spec_type_user_req_spec": "User Requirement Specification",
            "req_spec_type_system_req_spec": "System Requirement Specification",
            "req_rel_parent_of": "parent of",
            "req_rel_child_of": "child of",
            "req_rel_blocks": "blocks",
            "req_rel_depends": "depends on",
            "req_rel_related_to": "related to",
        },
    },
    "server": {
        "base_href": "/",
        "port": 8080,
        "secret_key": "reqtree-dev",
    },
    "catalog": {
        "path": "",
    },
}
