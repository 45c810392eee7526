"""Point-set clustering: DBSCAN, DBSCAN++ and K-Means."""

from autopalette.clustering.dbscan import DBSCAN
from autopalette.clustering.dbscanpp import DBSCANPlusPlus
from autopalette.clustering.kmeans import KMeans, KMeansResult, inertia
from autopalette.clustering.label import Label

__all__ = ["DBSCAN", "DBSCANPlusPlus", "KMeans", "KMeansResult", "Label", "inertia"]
