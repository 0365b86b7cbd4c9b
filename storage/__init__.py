"""
Storage Package
Pluggable persistence behind a single interface
"""

from flask import current_app

from .base import Storage, StorageError, DuplicateError
from .memory import MemoryStorage
from .database import DatabaseStorage

BACKENDS = {
    'memory': MemoryStorage,
    'database': DatabaseStorage,
}


def init_storage(app):
    """Create the configured backend, make sure the schema exists and seed SDG goals"""
    backend = app.config.get('STORAGE_BACKEND', 'database')
    if backend not in BACKENDS:
        raise ValueError(f'Unknown storage backend: {backend}')

    storage = BACKENDS[backend]()
    app.extensions['storage'] = storage

    with app.app_context():
        if backend == 'database':
            from models import db
            db.create_all()
        seeded = storage.seed_sdg_goals()

    app.logger.info(f'Storage backend "{backend}" ready ({seeded} SDG goals seeded)')
    return storage


def get_storage():
    """Storage backend of the current app"""
    return current_app.extensions['storage']


__all__ = [
    'Storage',
    'StorageError',
    'DuplicateError',
    'MemoryStorage',
    'DatabaseStorage',
    'init_storage',
    'get_storage',
]
