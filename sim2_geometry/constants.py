"""
Sim(2) geometry constants.

All magic numbers are centralized here with clear documentation.
"""

# =============================================================================
# Manifold Layout
# =============================================================================

# Tangent dimension: 2 translation + 1 rotation + 1 scale
SIM2_DIM = 4

# Tangent layout [tx, ty, theta, lambda] (inclusive index ranges)
SIM2_TRANSLATION_START = 0
SIM2_TRANSLATION_END = 1
SIM2_ROTATION_START = 2
SIM2_ROTATION_END = 2
SIM2_SCALE_START = 3
SIM2_SCALE_END = 3

# =============================================================================
# Numerical Stability Thresholds
# =============================================================================

# Below this |(theta, lambda)| the exp/log V integral uses its first-order series.
# ~sqrt(machine_epsilon) squared margin: second-order error < 1e-20
EXPMAP_EPSILON = 1e-10

# Ranges below this are treated as zero when forming range/bearing Jacobians
RANGE_EPSILON = 1e-12

# Default tolerance for Sim2.equals / ==
EQUALS_TOLERANCE_DEFAULT = 1e-9

# =============================================================================
# Alignment
# =============================================================================

# Fewer correspondences than this cannot fix rotation and scale
ALIGN_MIN_PAIRS = 2

# Centered variance at or below this fraction of the raw second moment sum |p|^2
# is degenerate (coincident points); relative so it is independent of units
ALIGN_DEGENERATE_EPSILON = 1e-20

# =============================================================================
# Persisted Record Format
# =============================================================================

# Current encode/decode version; version 0 records lack the scale field
SIM2_RECORD_VERSION = 1
SIM2_RECORD_LEGACY_VERSION = 0

# =============================================================================
# Value Perturbation
# =============================================================================

# Default seed for perturbation samplers
PERTURB_SEED_DEFAULT = 42

# Bits reserved for the index part of a symbol key
SYMBOL_INDEX_BITS = 56
