from .animation import AnimationSpec, CurveAnimation
from .curves import Point, Roulette, ParametricCurve, PolarCurve, AgnesiConstruction
from .polar_curves import Butterfly, Folium, Lemniscate
from .roulettes import Epicycloid, Hypocycloid
from .sampling import ParameterDomain, SampleTable, build_samples
from .witch_of_agnesi import WitchOfAgnesi


# Curve name -> factory building its animation with the default spec
CURVES = {
    'astroid': Hypocycloid.astroid,
    'deltoid': Hypocycloid.deltoid,
    'cardioid': Epicycloid.cardioid,
    'bernoulli_lemniscate': Lemniscate,
    'folium_of_descartes': Folium,
    'butterfly_curve': Butterfly,
    'witch_of_agnesi': WitchOfAgnesi,
}
