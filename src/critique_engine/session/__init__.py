"""Session layer: variant cache and the per-session coordinator."""

from critique_engine.session.coordinator import SynthesisCoordinator
from critique_engine.session.variant_cache import VariantCache

__all__ = ["SynthesisCoordinator", "VariantCache"]
