"""
Storage Interface
Every persistence operation the API needs, implemented by the memory and database backends
"""

from abc import ABC, abstractmethod

from models import SDG_GOALS


class StorageError(Exception):
    """Base class for storage failures"""


class DuplicateError(StorageError):
    """A unique field (username, email, SDG number) is already taken"""


class Storage(ABC):
    """
    Abstract storage interface

    "get" methods return None when the record does not exist. List methods
    return records in ascending id order unless documented otherwise.
    """

    name = None

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    @abstractmethod
    def get_user(self, id): ...

    @abstractmethod
    def get_user_by_username(self, username): ...

    @abstractmethod
    def get_user_by_email(self, email): ...

    @abstractmethod
    def create_user(self, data): ...

    @abstractmethod
    def get_users(self): ...

    @abstractmethod
    def update_user(self, id, data): ...

    # ------------------------------------------------------------------
    # Organizations
    # ------------------------------------------------------------------
    @abstractmethod
    def create_organization(self, data): ...

    @abstractmethod
    def get_organization(self, id): ...

    @abstractmethod
    def get_organizations(self): ...

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    @abstractmethod
    def create_project(self, data): ...

    @abstractmethod
    def get_project(self, id): ...

    @abstractmethod
    def get_projects(self): ...

    @abstractmethod
    def get_projects_by_organization(self, organization_id): ...

    @abstractmethod
    def get_projects_by_category(self, category): ...

    @abstractmethod
    def update_project(self, id, data):
        """Apply a partial update and refresh last_updated. Returns None if missing."""

    @abstractmethod
    def delete_project(self, id):
        """Delete a project with its indicators, values, forms and SDG mappings. Returns bool."""

    # ------------------------------------------------------------------
    # Indicators
    # ------------------------------------------------------------------
    @abstractmethod
    def create_indicator(self, data): ...

    @abstractmethod
    def get_indicator(self, id): ...

    @abstractmethod
    def get_indicators_by_project(self, project_id): ...

    @abstractmethod
    def get_indicators_by_category(self, category): ...

    @abstractmethod
    def update_indicator(self, id, data): ...

    @abstractmethod
    def create_indicator_value(self, data): ...

    @abstractmethod
    def get_indicator_values(self, indicator_id):
        """Values for an indicator, oldest date first"""

    @abstractmethod
    def get_indicator_values_by_project(self, project_id):
        """Values for a project, oldest date first"""

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------
    @abstractmethod
    def create_form_template(self, data): ...

    @abstractmethod
    def get_form_template(self, id): ...

    @abstractmethod
    def get_form_templates_by_project(self, project_id): ...

    @abstractmethod
    def create_form_submission(self, data): ...

    @abstractmethod
    def get_form_submissions(self, form_template_id): ...

    # ------------------------------------------------------------------
    # ESG scores
    # ------------------------------------------------------------------
    @abstractmethod
    def create_esg_score(self, data): ...

    @abstractmethod
    def get_latest_esg_score(self, organization_id):
        """Newest calculated_at wins, ties broken by the highest id"""

    @abstractmethod
    def get_esg_score_history(self, organization_id):
        """Oldest first"""

    # ------------------------------------------------------------------
    # SDG goals and mappings
    # ------------------------------------------------------------------
    @abstractmethod
    def create_sdg_goal(self, data): ...

    @abstractmethod
    def get_sdg_goal(self, id): ...

    @abstractmethod
    def get_sdg_goals(self):
        """Ordered by goal number"""

    @abstractmethod
    def create_project_sdg_mapping(self, data): ...

    @abstractmethod
    def get_project_sdg_mappings(self, project_id): ...

    @abstractmethod
    def get_sdg_mappings(self): ...

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    @abstractmethod
    def create_report(self, data): ...

    @abstractmethod
    def get_report(self, id): ...

    @abstractmethod
    def get_reports(self): ...

    @abstractmethod
    def get_reports_by_type(self, type): ...

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    @abstractmethod
    def create_notification(self, data): ...

    @abstractmethod
    def get_notification(self, id): ...

    @abstractmethod
    def get_user_notifications(self, user_id):
        """Newest first"""

    @abstractmethod
    def mark_notification_as_read(self, id):
        """Returns False when the notification does not exist"""

    @abstractmethod
    def mark_all_notifications_read(self, user_id):
        """Returns the number of notifications changed"""

    @abstractmethod
    def delete_notifications_before(self, cutoff):
        """Remove notifications created before cutoff. Returns the count removed."""

    # ------------------------------------------------------------------
    # Audit logs
    # ------------------------------------------------------------------
    @abstractmethod
    def create_audit_log(self, data): ...

    @abstractmethod
    def get_audit_logs(self):
        """Newest first"""

    @abstractmethod
    def get_user_audit_logs(self, user_id):
        """Newest first"""

    # ------------------------------------------------------------------
    # Helpers shared by both backends
    # ------------------------------------------------------------------
    def seed_sdg_goals(self):
        """Insert the 17 UN SDG goals if none exist. Returns the number inserted."""
        if self.get_sdg_goals():
            return 0
        for number, name, description, color in SDG_GOALS:
            self.create_sdg_goal({
                'number': number,
                'name': name,
                'description': description,
                'color': color
            })
        return len(SDG_GOALS)

    @staticmethod
    def _assign(record, data):
        """Copy known column values onto a record, never touching the primary key"""
        columns = record.__table__.columns.keys()
        for key, value in data.items():
            if key == 'id' or key not in columns:
                continue
            setattr(record, key, value)
        return record
