# scoring - relevance and search over the faculty roster
from .relevance import RelevanceResult, score_relevance, normalize_selection
from .search import FacultySearch, SearchFilters, SearchSummary, search_faculty
