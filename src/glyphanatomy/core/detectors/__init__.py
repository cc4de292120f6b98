"""Feature detectors.

Every detector takes a GeometryCache and a DetectionConfig and returns a
list of FeatureInstance. Detectors are pure functions of the cache; they
return an empty list when a feature is absent.

Groups:
- extremum: apex, vertex
- stem, crossbar, arm, crotch, spine: scanline and span analysis
- enclosed: bowl, counter, eye, loop
- terminals: serif, finial, spur, ear
- tittle, aperture, tail
"""

from glyphanatomy.core.detectors.aperture import detect_aperture
from glyphanatomy.core.detectors.arm import detect_arm
from glyphanatomy.core.detectors.crossbar import detect_crossbar
from glyphanatomy.core.detectors.crotch import detect_crotch
from glyphanatomy.core.detectors.enclosed import (
    detect_bowl,
    detect_counter,
    detect_eye,
    detect_loop,
)
from glyphanatomy.core.detectors.extremum import detect_apex, detect_vertex
from glyphanatomy.core.detectors.spine import detect_spine
from glyphanatomy.core.detectors.stem import detect_stem
from glyphanatomy.core.detectors.tail import detect_tail
from glyphanatomy.core.detectors.terminals import (
    detect_ear,
    detect_finial,
    detect_serif,
    detect_spur,
)
from glyphanatomy.core.detectors.tittle import detect_tittle

__all__ = [
    "detect_apex",
    "detect_aperture",
    "detect_arm",
    "detect_bowl",
    "detect_counter",
    "detect_crossbar",
    "detect_crotch",
    "detect_ear",
    "detect_eye",
    "detect_finial",
    "detect_loop",
    "detect_serif",
    "detect_spine",
    "detect_spur",
    "detect_stem",
    "detect_tail",
    "detect_tittle",
    "detect_vertex",
]
