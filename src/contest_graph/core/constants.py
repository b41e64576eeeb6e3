"""
Configuration constants for contest-graph analytics.

This module centralizes the default parameters, result tokens, source
column names and report labels used across the package.
"""

# =============================================================================
# Outcome Tokens
# =============================================================================

# Chess result notation, seen from participant A (white)
RESULT_A_WIN = "1-0"
RESULT_B_WIN = "0-1"
RESULT_DRAW = "1/2-1/2"

# Credit accrued per drawn game in mean/mode metrics
DRAW_CREDIT: float = 0.5

# =============================================================================
# PageRank Algorithm Parameters
# =============================================================================

# PageRank damping factor (probability of following links vs random teleport)
DEFAULT_DAMPING_FACTOR: float = 0.85

# Convergence criteria
DEFAULT_PAGERANK_TOLERANCE: float = 1e-8
DEFAULT_MAX_ITERATIONS: int = 200

# =============================================================================
# Shortest-Path Centrality Parameters
# =============================================================================

# None = use every node as a source (exact betweenness)
DEFAULT_BETWEENNESS_SAMPLES = None
DEFAULT_SAMPLING_SEED: int = 42

# Scale closeness by the reachable fraction of the graph
DEFAULT_WF_IMPROVED: bool = True

BACKEND_SPARSE = "sparse"
BACKEND_NETWORKX = "networkx"

# =============================================================================
# Source Columns
# =============================================================================

COLUMN_GAME_ID = "GameID"
COLUMN_WHITE = "White"
COLUMN_BLACK = "Black"
COLUMN_RESULT = "Result"
COLUMN_WHITE_RATING_DIFF = "WhiteRatingDiff"
COLUMN_BLACK_RATING_DIFF = "BlackRatingDiff"
COLUMN_WHITE_ELO = "WhiteElo"
COLUMN_BLACK_ELO = "BlackElo"
COLUMN_ECO = "ECO"
COLUMN_OPENING = "Opening"
COLUMN_TOTAL_MOVES = "TotalMoves"
COLUMN_TIME_CONTROL = "TimeControl"
COLUMN_EVENT = "Event"

UNKNOWN_OPENING = "?"

# =============================================================================
# Report Schema
# =============================================================================

ANALYSIS_PAGERANK = "PageRank"
ANALYSIS_BETWEENNESS = "Betweenness Centrality"
ANALYSIS_CLOSENESS = "Closeness Centrality"
ANALYSIS_PERFORMANCE = "Player Performance"
ANALYSIS_IN_DEGREE = "In-Degree"
ANALYSIS_OUT_DEGREE = "Out-Degree"
ANALYSIS_WEIGHTED_BETWEENNESS = "Weighted Betweenness"
ANALYSIS_WEIGHTED_CLOSENESS = "Weighted Closeness"
ANALYSIS_MEAN_MODE = "Mean/Mode Metrics"

# Fixed group order of the merged report
ANALYSIS_ORDER: tuple[str, ...] = (
    ANALYSIS_PAGERANK,
    ANALYSIS_BETWEENNESS,
    ANALYSIS_CLOSENESS,
    ANALYSIS_PERFORMANCE,
    ANALYSIS_IN_DEGREE,
    ANALYSIS_OUT_DEGREE,
    ANALYSIS_WEIGHTED_BETWEENNESS,
    ANALYSIS_WEIGHTED_CLOSENESS,
    ANALYSIS_MEAN_MODE,
)

REPORT_COLUMNS: list[str] = [
    "Analysis Type",
    "Player",
    "Score",
    "Win Rate",
    "Draws",
    "Mean Rating Diff",
    "Game Count",
]
