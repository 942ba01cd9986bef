"""
Natural neighbor interpolation on an incremental Delaunay triangulation.

Each query inserts a probe vertex, measures how much of each neighbor's
Voronoi cell the probe steals, and then undoes the insertion.  This is
meant for a modest number of target points against a fixed set of
sources, not for rasterizing.
"""
import logging

import numpy as np

from ..grid import delaunay
from ..grid.tri_tree import Vertex, DuplicatePoint
from ..utils import set_keywords
from .voronoi import Region

log=logging.getLogger(__name__)

class InterpolationError(delaunay.TriangulationError):
    pass

class Interpolator(object):
    """
    points: sequence of Vertex carrying the source values.
    """
    # relative slack allowed when a neighbor cell grows rather than shrinks
    # on insertion of the probe.  Anything beyond this is an error.
    clamp_rtol=1e-10

    InterpolationError=InterpolationError
    log=log

    def __init__(self,points,**kwargs):
        tri_kw={}
        for k in list(kwargs):
            if hasattr(delaunay.Triangulation,k):
                tri_kw[k]=kwargs.pop(k)
        set_keywords(self,kwargs)
        self.points=list(points)
        self.tri=delaunay.Triangulation(self.points,**tri_kw)

    @classmethod
    def from_xy(cls,xy,values,shuffle=True,seed=None,**kwargs):
        values=np.asarray(values,np.float64)
        _,ordered=delaunay.vertices_from_xy(xy,values,shuffle=shuffle,seed=seed)
        return cls(ordered,**kwargs)

    def nn_weights(self,x,y):
        """
        Returns ([Vertex,...], weights[N]) for the natural neighbors of
        (x,y).  Weights sum to 1.
        """
        probe=Vertex(x,y,synthetic=True)
        undo=self.tri.add_point(probe)
        try:
            neighbors=probe.connected_vertices()
            # bounding corners carry no data, and their open cells have
            # no meaningful area.
            real=[n for n in neighbors if not n.synthetic]
            areas_after=np.array([Region(n).area() for n in real])
            probe_area=Region(probe).area()
        finally:
            undo()
        areas_before=np.array([Region(n).area() for n in real])

        weights=areas_before-areas_after
        for i in np.nonzero(weights<0)[0]:
            # a little bit is okay, just some roundoff
            if -weights[i] <= self.clamp_rtol*areas_before[i]:
                weights[i]=0.0
            else:
                raise self.InterpolationError("NN interpolation: area of %s grew on insertion"%real[i])

        if len(real)==len(neighbors):
            total=probe_area
        else:
            # renormalize by what's left
            self.log.debug("Probe at %g,%g borders the bounding triangle"%(x,y))
            total=weights.sum()
        if not total>0:
            raise self.InterpolationError("Probe at %g,%g has no area"%(x,y))
        return real,weights/total

    def interpolate(self,x,y):
        try:
            neighbors,weights=self.nn_weights(x,y)
        except DuplicatePoint as exc:
            if exc.vertex.synthetic:
                # corners of the bounding triangle carry no data
                raise self.tri.OutOfBounds("Point (%f,%f) coincides with a bounding corner"%(x,y),
                                           point=exc.point)
            return exc.vertex.value
        values=np.array([n.value for n in neighbors])
        return (weights*values).sum()

    def interpolate_many(self,xy):
        """ xy: [N,2] array of query points. returns [N] values """
        xy=np.asarray(xy,np.float64).reshape([-1,2])
        result=np.zeros(len(xy),np.float64)
        for i,(x,y) in enumerate(xy):
            result[i]=self.interpolate(x,y)
        return result

def nn_interpolate(src_xy,src_values,dst_xy,seed=0):
    """
    One-shot natural neighbor interpolation.
    src_xy: [N,2] locations of source data points
    src_values: [N] values
    dst_xy: [M,2] or [2] locations to interpolate to
    """
    interp=Interpolator.from_xy(src_xy,src_values,seed=seed)
    dst_xy=np.asarray(dst_xy,np.float64)
    result=interp.interpolate_many(dst_xy)
    if dst_xy.ndim==1:
        return result[0]
    return result
