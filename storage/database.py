"""
Database Storage
Persists records through Flask-SQLAlchemy
"""

from datetime import datetime
from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import (
    db, User, Organization, Project, Indicator, IndicatorValue,
    FormTemplate, FormSubmission, EsgScore, SdgGoal, ProjectSdgMapping,
    Report, Notification, AuditLog
)
from .base import Storage, DuplicateError


class DatabaseStorage(Storage):
    """Storage backend backed by the application's SQLAlchemy session"""

    name = 'database'

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _commit(self):
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            current_app.logger.warning(f'Integrity error: {str(e.orig)}')
            raise DuplicateError(str(e.orig)) from e
        except Exception:
            db.session.rollback()
            raise

    def _insert(self, model, data):
        record = self._assign(model(), data)
        db.session.add(record)
        self._commit()
        return record

    def _update(self, model, id, data):
        record = db.session.get(model, id)
        if not record:
            return None
        self._assign(record, data)
        self._commit()
        return record

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_user(self, id):
        return db.session.get(User, id)

    def get_user_by_username(self, username):
        return User.query.filter_by(username=username).first()

    def get_user_by_email(self, email):
        return User.query.filter_by(email=email).first()

    def create_user(self, data):
        return self._insert(User, data)

    def get_users(self):
        return User.query.order_by(User.id).all()

    def update_user(self, id, data):
        return self._update(User, id, data)

    # ------------------------------------------------------------------
    # Organizations
    # ------------------------------------------------------------------
    def create_organization(self, data):
        return self._insert(Organization, data)

    def get_organization(self, id):
        return db.session.get(Organization, id)

    def get_organizations(self):
        return Organization.query.order_by(Organization.id).all()

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    def create_project(self, data):
        return self._insert(Project, data)

    def get_project(self, id):
        return db.session.get(Project, id)

    def get_projects(self):
        return Project.query.order_by(Project.id).all()

    def get_projects_by_organization(self, organization_id):
        return Project.query.filter_by(organization_id=organization_id).order_by(Project.id).all()

    def get_projects_by_category(self, category):
        return Project.query.filter_by(category=category).order_by(Project.id).all()

    def update_project(self, id, data):
        return self._update(Project, id, dict(data, last_updated=datetime.utcnow()))

    def delete_project(self, id):
        project = db.session.get(Project, id)
        if not project:
            return False

        try:
            template_ids = [t.id for t in FormTemplate.query.filter_by(project_id=id)]
            if template_ids:
                FormSubmission.query.filter(
                    FormSubmission.form_template_id.in_(template_ids)
                ).delete(synchronize_session='fetch')
            FormTemplate.query.filter_by(project_id=id).delete(synchronize_session='fetch')
            IndicatorValue.query.filter_by(project_id=id).delete(synchronize_session='fetch')
            Indicator.query.filter_by(project_id=id).delete(synchronize_session='fetch')
            ProjectSdgMapping.query.filter_by(project_id=id).delete(synchronize_session='fetch')
            db.session.delete(project)
        except Exception:
            db.session.rollback()
            raise
        self._commit()
        return True

    # ------------------------------------------------------------------
    # Indicators
    # ------------------------------------------------------------------
    def create_indicator(self, data):
        return self._insert(Indicator, data)

    def get_indicator(self, id):
        return db.session.get(Indicator, id)

    def get_indicators_by_project(self, project_id):
        return Indicator.query.filter_by(project_id=project_id).order_by(Indicator.id).all()

    def get_indicators_by_category(self, category):
        return Indicator.query.filter_by(category=category).order_by(Indicator.id).all()

    def update_indicator(self, id, data):
        return self._update(Indicator, id, data)

    def create_indicator_value(self, data):
        return self._insert(IndicatorValue, data)

    def get_indicator_values(self, indicator_id):
        return IndicatorValue.query.filter_by(indicator_id=indicator_id).order_by(
            IndicatorValue.date, IndicatorValue.id
        ).all()

    def get_indicator_values_by_project(self, project_id):
        return IndicatorValue.query.filter_by(project_id=project_id).order_by(
            IndicatorValue.date, IndicatorValue.id
        ).all()

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------
    def create_form_template(self, data):
        return self._insert(FormTemplate, data)

    def get_form_template(self, id):
        return db.session.get(FormTemplate, id)

    def get_form_templates_by_project(self, project_id):
        return FormTemplate.query.filter_by(project_id=project_id).order_by(FormTemplate.id).all()

    def create_form_submission(self, data):
        return self._insert(FormSubmission, data)

    def get_form_submissions(self, form_template_id):
        return FormSubmission.query.filter_by(form_template_id=form_template_id).order_by(FormSubmission.id).all()

    # ------------------------------------------------------------------
    # ESG scores
    # ------------------------------------------------------------------
    def create_esg_score(self, data):
        return self._insert(EsgScore, data)

    def get_latest_esg_score(self, organization_id):
        return EsgScore.query.filter_by(organization_id=organization_id).order_by(
            EsgScore.calculated_at.desc(), EsgScore.id.desc()
        ).first()

    def get_esg_score_history(self, organization_id):
        return EsgScore.query.filter_by(organization_id=organization_id).order_by(
            EsgScore.calculated_at, EsgScore.id
        ).all()

    # ------------------------------------------------------------------
    # SDG goals and mappings
    # ------------------------------------------------------------------
    def create_sdg_goal(self, data):
        return self._insert(SdgGoal, data)

    def get_sdg_goal(self, id):
        return db.session.get(SdgGoal, id)

    def get_sdg_goals(self):
        return SdgGoal.query.order_by(SdgGoal.number).all()

    def create_project_sdg_mapping(self, data):
        return self._insert(ProjectSdgMapping, data)

    def get_project_sdg_mappings(self, project_id):
        return ProjectSdgMapping.query.filter_by(project_id=project_id).order_by(ProjectSdgMapping.id).all()

    def get_sdg_mappings(self):
        return ProjectSdgMapping.query.order_by(ProjectSdgMapping.id).all()

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def create_report(self, data):
        return self._insert(Report, data)

    def get_report(self, id):
        return db.session.get(Report, id)

    def get_reports(self):
        return Report.query.order_by(Report.id).all()

    def get_reports_by_type(self, type):
        return Report.query.filter_by(type=type).order_by(Report.id).all()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def create_notification(self, data):
        return self._insert(Notification, dict(data, read=False))

    def get_notification(self, id):
        return db.session.get(Notification, id)

    def get_user_notifications(self, user_id):
        return Notification.query.filter_by(user_id=user_id).order_by(
            Notification.created_at.desc(), Notification.id.desc()
        ).all()

    def mark_notification_as_read(self, id):
        notification = db.session.get(Notification, id)
        if not notification:
            return False
        notification.read = True
        self._commit()
        return True

    def mark_all_notifications_read(self, user_id):
        count = Notification.query.filter_by(
            user_id=user_id,
            read=False
        ).update({'read': True})
        self._commit()
        return count

    def delete_notifications_before(self, cutoff):
        count = Notification.query.filter(
            Notification.created_at < cutoff
        ).delete(synchronize_session='fetch')
        self._commit()
        return count

    # ------------------------------------------------------------------
    # Audit logs
    # ------------------------------------------------------------------
    def create_audit_log(self, data):
        return self._insert(AuditLog, data)

    def get_audit_logs(self):
        return AuditLog.query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).all()

    def get_user_audit_logs(self, user_id):
        return AuditLog.query.filter_by(user_id=user_id).order_by(
            AuditLog.timestamp.desc(), AuditLog.id.desc()
        ).all()
