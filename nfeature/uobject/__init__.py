from nfeature.uobject.uobject import UObject, as_values
from nfeature.uobject.record import FeatureRecord, SeqFeatureLike, Strand

__all__ = ['UObject', 'as_values', 'FeatureRecord', 'SeqFeatureLike', 'Strand']
