"""
In-memory Storage
Per-entity dictionaries keyed by auto-incremented ids, starting at 1
"""

from datetime import datetime
import threading

from models import (
    User, Organization, Project, Indicator, IndicatorValue,
    FormTemplate, FormSubmission, EsgScore, SdgGoal, ProjectSdgMapping,
    Report, Notification, AuditLog
)
from .base import Storage, DuplicateError


class MemoryStorage(Storage):
    """
    Storage backend holding transient model instances in process memory
    Data is lost on restart
    """

    name = 'memory'

    def __init__(self):
        self._tables = {}
        self._counters = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _table(self, model):
        return self._tables.setdefault(model, {})

    def _insert(self, model, data):
        """Build a record, apply column defaults and assign the next id"""
        record = self._assign(model(), data)

        for column in model.__table__.columns:
            if column.primary_key or column.default is None:
                continue
            if getattr(record, column.key) is None:
                default = column.default
                setattr(record, column.key, default.arg(None) if default.is_callable else default.arg)

        with self._lock:
            next_id = self._counters.get(model, 0) + 1
            self._counters[model] = next_id
            record.id = next_id
            self._table(model)[next_id] = record
        return record

    def _get(self, model, id):
        if id is None:
            return None
        return self._table(model).get(id)

    def _all(self, model):
        return [self._table(model)[key] for key in sorted(self._table(model))]

    def _filter(self, model, **criteria):
        return [
            record for record in self._all(model)
            if all(getattr(record, key) == value for key, value in criteria.items())
        ]

    def _delete_where(self, model, predicate):
        with self._lock:
            table = self._table(model)
            doomed = [key for key, record in table.items() if predicate(record)]
            for key in doomed:
                del table[key]
        return len(doomed)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_user(self, id):
        return self._get(User, id)

    def get_user_by_username(self, username):
        matches = self._filter(User, username=username)
        return matches[0] if matches else None

    def get_user_by_email(self, email):
        matches = self._filter(User, email=email)
        return matches[0] if matches else None

    def create_user(self, data):
        with self._lock:
            if self.get_user_by_username(data.get('username')):
                raise DuplicateError(f"Username already exists: {data.get('username')}")
            if self.get_user_by_email(data.get('email')):
                raise DuplicateError(f"Email already exists: {data.get('email')}")
            return self._insert(User, data)

    def get_users(self):
        return self._all(User)

    def update_user(self, id, data):
        user = self.get_user(id)
        if not user:
            return None
        with self._lock:
            for field in ('username', 'email'):
                if field in data:
                    other = self._filter(User, **{field: data[field]})
                    if other and other[0].id != id:
                        raise DuplicateError(f'{field.capitalize()} already exists: {data[field]}')
            return self._assign(user, data)

    # ------------------------------------------------------------------
    # Organizations
    # ------------------------------------------------------------------
    def create_organization(self, data):
        return self._insert(Organization, data)

    def get_organization(self, id):
        return self._get(Organization, id)

    def get_organizations(self):
        return self._all(Organization)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    def create_project(self, data):
        return self._insert(Project, data)

    def get_project(self, id):
        return self._get(Project, id)

    def get_projects(self):
        return self._all(Project)

    def get_projects_by_organization(self, organization_id):
        return self._filter(Project, organization_id=organization_id)

    def get_projects_by_category(self, category):
        return self._filter(Project, category=category)

    def update_project(self, id, data):
        project = self.get_project(id)
        if not project:
            return None
        self._assign(project, data)
        project.last_updated = datetime.utcnow()
        return project

    def delete_project(self, id):
        with self._lock:
            if id not in self._table(Project):
                return False

            template_ids = {t.id for t in self._filter(FormTemplate, project_id=id)}
            self._delete_where(FormSubmission, lambda r: r.form_template_id in template_ids)
            self._delete_where(FormTemplate, lambda r: r.project_id == id)
            self._delete_where(IndicatorValue, lambda r: r.project_id == id)
            self._delete_where(Indicator, lambda r: r.project_id == id)
            self._delete_where(ProjectSdgMapping, lambda r: r.project_id == id)
            del self._table(Project)[id]
        return True

    # ------------------------------------------------------------------
    # Indicators
    # ------------------------------------------------------------------
    def create_indicator(self, data):
        return self._insert(Indicator, data)

    def get_indicator(self, id):
        return self._get(Indicator, id)

    def get_indicators_by_project(self, project_id):
        return self._filter(Indicator, project_id=project_id)

    def get_indicators_by_category(self, category):
        return self._filter(Indicator, category=category)

    def update_indicator(self, id, data):
        indicator = self.get_indicator(id)
        if not indicator:
            return None
        return self._assign(indicator, data)

    def create_indicator_value(self, data):
        return self._insert(IndicatorValue, data)

    def get_indicator_values(self, indicator_id):
        values = self._filter(IndicatorValue, indicator_id=indicator_id)
        return sorted(values, key=lambda v: (v.date, v.id))

    def get_indicator_values_by_project(self, project_id):
        values = self._filter(IndicatorValue, project_id=project_id)
        return sorted(values, key=lambda v: (v.date, v.id))

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------
    def create_form_template(self, data):
        return self._insert(FormTemplate, data)

    def get_form_template(self, id):
        return self._get(FormTemplate, id)

    def get_form_templates_by_project(self, project_id):
        return self._filter(FormTemplate, project_id=project_id)

    def create_form_submission(self, data):
        return self._insert(FormSubmission, data)

    def get_form_submissions(self, form_template_id):
        return self._filter(FormSubmission, form_template_id=form_template_id)

    # ------------------------------------------------------------------
    # ESG scores
    # ------------------------------------------------------------------
    def create_esg_score(self, data):
        return self._insert(EsgScore, data)

    def get_latest_esg_score(self, organization_id):
        history = self.get_esg_score_history(organization_id)
        return history[-1] if history else None

    def get_esg_score_history(self, organization_id):
        scores = self._filter(EsgScore, organization_id=organization_id)
        return sorted(scores, key=lambda s: (s.calculated_at, s.id))

    # ------------------------------------------------------------------
    # SDG goals and mappings
    # ------------------------------------------------------------------
    def create_sdg_goal(self, data):
        with self._lock:
            if self._filter(SdgGoal, number=data.get('number')):
                raise DuplicateError(f"SDG goal {data.get('number')} already exists")
            return self._insert(SdgGoal, data)

    def get_sdg_goal(self, id):
        return self._get(SdgGoal, id)

    def get_sdg_goals(self):
        return sorted(self._all(SdgGoal), key=lambda g: g.number)

    def create_project_sdg_mapping(self, data):
        return self._insert(ProjectSdgMapping, data)

    def get_project_sdg_mappings(self, project_id):
        return self._filter(ProjectSdgMapping, project_id=project_id)

    def get_sdg_mappings(self):
        return self._all(ProjectSdgMapping)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def create_report(self, data):
        return self._insert(Report, data)

    def get_report(self, id):
        return self._get(Report, id)

    def get_reports(self):
        return self._all(Report)

    def get_reports_by_type(self, type):
        return self._filter(Report, type=type)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def create_notification(self, data):
        data = dict(data, read=False)
        return self._insert(Notification, data)

    def get_notification(self, id):
        return self._get(Notification, id)

    def get_user_notifications(self, user_id):
        notifications = self._filter(Notification, user_id=user_id)
        return sorted(notifications, key=lambda n: (n.created_at, n.id), reverse=True)

    def mark_notification_as_read(self, id):
        notification = self.get_notification(id)
        if not notification:
            return False
        notification.read = True
        return True

    def mark_all_notifications_read(self, user_id):
        unread = self._filter(Notification, user_id=user_id, read=False)
        for notification in unread:
            notification.read = True
        return len(unread)

    def delete_notifications_before(self, cutoff):
        return self._delete_where(Notification, lambda n: n.created_at < cutoff)

    # ------------------------------------------------------------------
    # Audit logs
    # ------------------------------------------------------------------
    def create_audit_log(self, data):
        return self._insert(AuditLog, data)

    def get_audit_logs(self):
        return sorted(self._all(AuditLog), key=lambda a: (a.timestamp, a.id), reverse=True)

    def get_user_audit_logs(self, user_id):
        logs = self._filter(AuditLog, user_id=user_id)
        return sorted(logs, key=lambda a: (a.timestamp, a.id), reverse=True)
