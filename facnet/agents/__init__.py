# agents - one task, one agent, done well
from .roster_loader import RosterLoader, Roster, LoadResult, LoadError, ErrorCode
