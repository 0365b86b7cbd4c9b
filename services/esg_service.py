"""
ESG Service
Score calculation and dashboard aggregation over projects and indicators
"""

from datetime import datetime

import pandas as pd
from flask import current_app

from models import (
    AuditAction, IndicatorDataType, ProjectCategory, ProjectStatus
)
from storage import get_storage

from .audit_service import AuditService
from .cache_service import cache_service
from .notification_service import NotificationService

PILLARS = {
    ProjectCategory.ENVIRONMENTAL.value: 'environmental_score',
    ProjectCategory.SOCIAL.value: 'social_score',
    ProjectCategory.GOVERNANCE.value: 'governance_score',
}


def _number(value, digits=2):
    """Round a pandas/numpy scalar to a plain float, NaN becomes None"""
    if value is None or pd.isna(value):
        return None
    return round(float(value), digits)


def _projects_frame(projects):
    df = pd.DataFrame([p.to_dict() for p in projects])
    df['completion'] = pd.to_numeric(df['completion'], errors='coerce').fillna(0)
    df['impact_score'] = pd.to_numeric(df['impact_score'], errors='coerce')
    return df


class EsgService:
    """ESG score and dashboard aggregation"""

    @staticmethod
    def calculate_scores(organization, period, calculated_by=None):
        """
        Derive an ESG score from the organization's project impact scores

        Each pillar is the mean impact_score of the organization's projects in
        that category. A pillar without scored projects keeps its value from the
        previous score, or 0 when there is none.

        Args:
            organization: Organization object
            period: label such as "Q3 2023"
            calculated_by: acting user, for the audit log

        Returns:
            EsgScore: the stored score

        Raises:
            ValueError: if no project of the organization has an impact score
        """
        storage = get_storage()
        projects = storage.get_projects_by_organization(organization.id)
        if not projects:
            raise ValueError('No projects with an impact score for this organization')

        df = _projects_frame(projects)
        scored = df.dropna(subset=['impact_score'])
        if scored.empty:
            raise ValueError('No projects with an impact score for this organization')

        means = scored.groupby('category')['impact_score'].mean()
        previous = storage.get_latest_esg_score(organization.id)

        data = {
            'organization_id': organization.id,
            'period': period,
            'calculated_at': datetime.utcnow()
        }
        for category, attribute in PILLARS.items():
            if category in means.index:
                data[attribute] = _number(means[category])
            else:
                data[attribute] = getattr(previous, attribute) if previous else 0.0

        score = storage.create_esg_score(data)

        AuditService.log(
            AuditAction.CALCULATE,
            user=calculated_by,
            entity_type='esg_score',
            entity_id=score.id,
            details={
                'organization_id': organization.id,
                'period': period,
                'projects_scored': int(len(scored))
            }
        )
        NotificationService.notify_esg_score_calculated(score, organization)
        cache_service.clear_dashboard_cache()

        current_app.logger.info(f'ESG score calculated for organization {organization.id} ({period})')
        return score

    @staticmethod
    def dashboard_summary(organization_id=None):
        """
        Aggregate project progress for the dashboard

        Args:
            organization_id: restrict to one organization, or None for all

        Returns:
            dict: JSON-ready summary
        """
        cached = cache_service.get_dashboard_data(organization_id)
        if cached is not None:
            return cached

        storage = get_storage()
        if organization_id is not None:
            projects = storage.get_projects_by_organization(organization_id)
        else:
            projects = storage.get_projects()

        summary = {
            'organization_id': organization_id,
            'total_projects': len(projects),
            'projects_by_status': {status.value: 0 for status in ProjectStatus},
            'projects_by_category': {category.value: 0 for category in ProjectCategory},
            'average_completion': None,
            'average_impact_score': None,
            'category_breakdown': [],
            'latest_esg_score': None,
            'sdg_coverage': [],
            'recent_projects': []
        }

        if organization_id is not None:
            latest = storage.get_latest_esg_score(organization_id)
            summary['latest_esg_score'] = latest.to_dict() if latest else None

        if not projects:
            cache_service.set_dashboard_data(organization_id, summary)
            return summary

        df = _projects_frame(projects)

        for status, count in df['status'].value_counts().items():
            summary['projects_by_status'][status] = int(count)
        for category, count in df['category'].value_counts().items():
            summary['projects_by_category'][category] = int(count)

        summary['average_completion'] = _number(df['completion'].mean())
        summary['average_impact_score'] = _number(df['impact_score'].mean())

        breakdown = df.groupby('category').agg(
            projects=('id', 'count'),
            average_completion=('completion', 'mean'),
            average_impact_score=('impact_score', 'mean')
        )
        summary['category_breakdown'] = [
            {
                'category': category,
                'projects': int(row['projects']),
                'average_completion': _number(row['average_completion']),
                'average_impact_score': _number(row['average_impact_score'])
            }
            for category, row in breakdown.iterrows()
        ]

        summary['sdg_coverage'] = EsgService._sdg_coverage({p.id for p in projects})

        recent = sorted(projects, key=lambda p: (p.last_updated, p.id), reverse=True)[:5]
        summary['recent_projects'] = [p.to_dict() for p in recent]

        cache_service.set_dashboard_data(organization_id, summary)
        return summary

    @staticmethod
    def _sdg_coverage(project_ids):
        """Number of distinct projects mapped to each SDG goal"""
        storage = get_storage()
        mappings = [m for m in storage.get_sdg_mappings() if m.project_id in project_ids]
        if not mappings:
            return []

        frame = pd.DataFrame([m.to_dict() for m in mappings])
        counts = frame.groupby('sdg_id')['project_id'].nunique()

        coverage = []
        for goal in storage.get_sdg_goals():
            if goal.id in counts.index:
                coverage.append({
                    'sdg_id': goal.id,
                    'number': goal.number,
                    'name': goal.name,
                    'color': goal.color,
                    'projects': int(counts[goal.id])
                })
        return coverage

    @staticmethod
    def indicator_summary(indicator):
        """
        Statistics over the recorded values of one indicator

        Returns:
            dict: count, latest value and type-specific statistics
        """
        values = get_storage().get_indicator_values(indicator.id)

        summary = {
            'indicator': indicator.to_dict(),
            'count': len(values),
            'latest': values[-1].to_dict() if values else None,
            'statistics': None
        }
        if not values:
            return summary

        if indicator.data_type == IndicatorDataType.NUMBER.value:
            series = pd.to_numeric(
                pd.Series([str(v.value).replace(',', '') for v in values]),
                errors='coerce'
            ).dropna()
            series = series[~series.isin([float('inf'), float('-inf')])]
            if not series.empty:
                summary['statistics'] = {
                    'min': _number(series.min()),
                    'max': _number(series.max()),
                    'mean': _number(series.mean()),
                    'sum': _number(series.sum()),
                    'change': _number(series.iloc[-1] - series.iloc[0])
                }

        elif indicator.data_type == IndicatorDataType.BOOLEAN.value:
            parsed = []
            for v in values:
                try:
                    parsed.append(indicator.parse_value(v.value))
                except ValueError:
                    continue
            summary['statistics'] = {
                'true_count': sum(1 for p in parsed if p),
                'false_count': sum(1 for p in parsed if not p)
            }

        return summary
