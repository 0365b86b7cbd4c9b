"""
Indicator Models
Impact metrics and the values recorded against them
"""

from datetime import datetime
import enum
import math
from . import db


class IndicatorDataType(enum.Enum):
    """How an indicator value string is interpreted"""
    NUMBER = 'number'
    TEXT = 'text'
    BOOLEAN = 'boolean'
    DATE = 'date'


TRUE_VALUES = ('true', 'yes', '1')
FALSE_VALUES = ('false', 'no', '0')
VALUE_DATE_FORMATS = ('%Y-%m-%d', '%Y-%m-%dT%H:%M:%S', '%Y-%m-%dT%H:%M:%S.%fZ', '%Y-%m-%dT%H:%M:%SZ')


class Indicator(db.Model):
    """
    Indicator model
    A measurable metric attached to a project
    """
    __tablename__ = 'indicators'

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.String(20), nullable=False, index=True)
    unit = db.Column(db.String(50))
    data_type = db.Column(db.String(20), nullable=False)
    customizable = db.Column(db.Boolean, default=True)

    # Foreign Keys
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id', ondelete='CASCADE'), index=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'))

    def __repr__(self):
        return f'<Indicator {self.id}: {self.name}>'

    def parse_value(self, value):
        """
        Interpret a value string through this indicator's data type

        Returns:
            float, bool, datetime or str

        Raises:
            ValueError: if the value does not match the data type
        """
        if self.data_type == IndicatorDataType.NUMBER.value:
            number = float(str(value).replace(',', ''))
            if not math.isfinite(number):
                raise ValueError(f'Not a finite number: {value}')
            return number

        if self.data_type == IndicatorDataType.BOOLEAN.value:
            lowered = str(value).strip().lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise ValueError(f'Not a boolean: {value}')

        if self.data_type == IndicatorDataType.DATE.value:
            for fmt in VALUE_DATE_FORMATS:
                try:
                    return datetime.strptime(str(value), fmt)
                except ValueError:
                    continue
            raise ValueError(f'Not a date: {value}')

        return str(value)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'category': self.category,
            'unit': self.unit,
            'data_type': self.data_type,
            'customizable': self.customizable,
            'project_id': self.project_id,
            'created_by_id': self.created_by_id
        }


class IndicatorValue(db.Model):
    """
    A single recorded value for an indicator
    Stored as text, interpreted through the indicator's data_type
    """
    __tablename__ = 'indicator_values'

    id = db.Column(db.Integer, primary_key=True)

    value = db.Column(db.Text, nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Foreign Keys
    indicator_id = db.Column(db.Integer, db.ForeignKey('indicators.id', ondelete='CASCADE'), nullable=False, index=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    submitted_by_id = db.Column(db.Integer, db.ForeignKey('users.id'))

    def __repr__(self):
        return f'<IndicatorValue {self.indicator_id}={self.value}>'

    def to_dict(self):
        return {
            'id': self.id,
            'indicator_id': self.indicator_id,
            'project_id': self.project_id,
            'value': self.value,
            'date': self.date.isoformat() if self.date else None,
            'submitted_by_id': self.submitted_by_id
        }
