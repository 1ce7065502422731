from .base import FacultyProvider
from .rest import RestStoreProvider, create_rest_provider
from .snapshot import SnapshotProvider, InMemoryProvider
from ..core.resilience import CollaboratorUnavailable
