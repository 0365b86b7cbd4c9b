"""
Roles and Permissions
Role-Based Access Control (RBAC) with a fixed role table
"""

import enum


class UserRole(enum.Enum):
    """User roles, lowest privilege last"""
    ADMIN = 'admin'
    REVIEWER = 'reviewer'
    CONTRIBUTOR = 'contributor'
    VIEWER = 'viewer'


# (code, name, category, description)
PERMISSIONS = [
    # Organization Management
    ('view_organizations', 'View Organizations', 'organization', 'View organization details'),
    ('manage_organizations', 'Manage Organizations', 'organization', 'Create organizations'),

    # User Management
    ('view_users', 'View Users', 'user', 'View user list and details'),
    ('manage_users', 'Manage Users', 'user', 'Create users, assign roles, deactivate accounts'),

    # Projects
    ('view_projects', 'View Projects', 'project', 'View project list and details'),
    ('create_project', 'Create Project', 'project', 'Create new projects'),
    ('edit_project', 'Edit Project', 'project', 'Edit project details and progress'),
    ('delete_project', 'Delete Project', 'project', 'Delete projects'),

    # Indicators
    ('view_indicators', 'View Indicators', 'indicator', 'View indicators and recorded values'),
    ('create_indicator', 'Create Indicator', 'indicator', 'Define new impact indicators'),
    ('edit_indicator', 'Edit Indicator', 'indicator', 'Edit indicator definitions'),
    ('submit_indicator_values', 'Submit Indicator Values', 'indicator', 'Record indicator values'),

    # Data collection forms
    ('view_forms', 'View Forms', 'form', 'View form templates and submissions'),
    ('create_form_template', 'Create Form Template', 'form', 'Design data collection forms'),
    ('submit_forms', 'Submit Forms', 'form', 'Submit data collection forms'),

    # ESG & SDG
    ('view_esg_scores', 'View ESG Scores', 'esg', 'View ESG score history'),
    ('manage_esg_scores', 'Manage ESG Scores', 'esg', 'Record and calculate ESG scores'),
    ('view_sdg_mappings', 'View SDG Mappings', 'sdg', 'View project SDG alignment'),
    ('map_sdgs', 'Map SDGs', 'sdg', 'Map projects to SDG goals'),

    # Reporting
    ('view_reports', 'View Reports', 'report', 'View report definitions'),
    ('create_report', 'Create Report', 'report', 'Create new reports'),
    ('export_report', 'Export Report', 'report', 'Export reports to various formats'),

    # System Administration
    ('view_audit_logs', 'View Audit Logs', 'system', 'View system audit logs'),
]

ALL_PERMISSIONS = frozenset(code for code, _, _, _ in PERMISSIONS)

VIEW_PERMISSIONS = frozenset([
    'view_organizations', 'view_projects', 'view_indicators', 'view_forms',
    'view_esg_scores', 'view_sdg_mappings', 'view_reports'
])

ROLE_PERMISSIONS = {
    # Administrator - Full access
    UserRole.ADMIN.value: ALL_PERMISSIONS,

    # Reviewer - oversight of projects, scores and reports
    UserRole.REVIEWER.value: VIEW_PERMISSIONS | {
        'view_users', 'edit_project', 'create_report', 'export_report',
        'manage_esg_scores', 'view_audit_logs'
    },

    # Contributor - default for new accounts
    UserRole.CONTRIBUTOR.value: VIEW_PERMISSIONS | {
        'create_project', 'edit_project',
        'create_indicator', 'edit_indicator', 'submit_indicator_values',
        'create_form_template', 'submit_forms',
        'map_sdgs', 'create_report', 'export_report'
    },

    # Viewer - read-only
    UserRole.VIEWER.value: VIEW_PERMISSIONS | {'export_report'},
}


def role_has_permission(role, permission_code):
    """Check if a role grants a permission code"""
    return permission_code in ROLE_PERMISSIONS.get(role, frozenset())
