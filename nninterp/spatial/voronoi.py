"""
Voronoi regions read off the Delaunay triangulation.

The vertices of the region for a vertex v are the circumcenters of the
leaf triangles incident to v, ordered by walking across shared edges
around v.
"""
import numpy as np

from ..utils import signed_area
from ..grid.tri_tree import InvariantViolation

class Region(object):
    """
    center: the Vertex this region belongs to
    triangles: incident triangles in walk order
    vertices: [N,2] circumcenters of those triangles
    closed: False if the walk ran off the edge of the triangulation,
      which only happens for the corners of the bounding triangle.
    """
    def __init__(self,center):
        self.center=center
        self.triangles,self.closed=self.walk_fan(center)
        self.vertices=np.array([t.circumcenter() for t in self.triangles]).reshape([-1,2])

    @staticmethod
    def walk_fan(center):
        if not center.incident:
            raise InvariantViolation("%s has no incident triangles"%(center,))
        t0=center.incident[0]
        cur_t=t0
        cur_v=t0.vertices[0]
        if cur_v is center:
            cur_v=t0.vertices[1]

        fan=[]
        while 1:
            fan.append(cur_t)
            new_t=cur_t.adjacent_across(center,cur_v)
            if new_t is t0:
                return fan,True
            if new_t is None:
                return fan,False
            if len(fan)>len(center.incident):
                raise InvariantViolation("Walk around %s did not close"%(center,))
            cur_v=new_t.opposite_vertex(cur_t)
            cur_t=new_t

    def area(self):
        return abs(signed_area(self.vertices))

    def __repr__(self):
        return "<Region of %s, %d vertices>"%(self.center,len(self.vertices))
