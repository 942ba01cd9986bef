"""
Vertices and nodes of the triangle tree underlying the incremental
Delaunay triangulation.

The tree is append-only: splitting or flipping a triangle retires it
and hangs the new triangles below it as children.  The leaves are
the live triangulation.  Each vertex keeps a back-index of the leaves
it is a corner of, which is how edge neighbors are found without an
explicit edge table.
"""
import logging

import numpy as np

from ..spatial import predicates
from ..utils import set_keywords
from .. import undoer

log=logging.getLogger(__name__)

class TriangulationError(Exception):
    def __init__(self,*a,**k):
        super(TriangulationError,self).__init__(*a)
        set_keywords(self,k)

class NullPointReference(TriangulationError):
    """ A point was required, but got None """
    pass

class OutOfBounds(TriangulationError):
    point=None

class DuplicatePoint(TriangulationError):
    """
    Point coincides with an existing vertex
    """
    point=None
    vertex=None

class DegenerateTriangle(TriangulationError):
    triangle=None

class InvariantViolation(TriangulationError):
    pass

class CannotUninsert(InvariantViolation):
    pass

class CannotUnflip(InvariantViolation):
    pass

class AlreadyReverted(InvariantViolation,undoer.RevertError):
    pass


class Vertex(object):
    """
    A point in the triangulation with an associated scalar value.
    incident: leaf triangles which have this vertex as a corner.  Order
    is not meaningful.
    synthetic: True for vertices which carry no data, i.e. corners of
    the bounding triangle and interpolation probes.
    """
    def __init__(self,x,y,value=0.0,synthetic=False):
        self.x=float(x)
        self.y=float(y)
        self.value=value
        self.synthetic=synthetic
        self.incident=[]

    def __repr__(self):
        return "Vertex(%g,%g,value=%r)"%(self.x,self.y,self.value)

    @property
    def xy(self):
        return np.array([self.x,self.y])

    def add_incident(self,t):
        self.incident.append(t)

    def remove_incident(self,t):
        last=len(self.incident)-1
        for i in range(last,-1,-1):
            if self.incident[i] is t:
                self.incident[i]=self.incident[last]
                del self.incident[last]
                return
        raise InvariantViolation("%s not found in incident triangles of %s"%(t,self))

    def connected_vertices(self):
        """
        Vertices sharing a Delaunay edge with this vertex. These are
        the natural neighbors of this vertex.
        """
        seen=set([id(self)])
        result=[]
        for t in self.incident:
            for v in t.vertices:
                if id(v) in seen:
                    continue
                seen.add(id(v))
                result.append(v)
        return result


class TriangleNode(object):
    """
    Node in the split-and-flip tree.  vertices are stored clockwise.
    children is empty for a live triangle, 3 long after a split, and
    2 long after a flip, in which case the flip partner holds the same
    two children.
    """
    log=log

    def __init__(self,v1,v2,v3):
        if not predicates.is_clockwise(v1.x,v1.y,v2.x,v2.y,v3.x,v3.y):
            v1,v2=v2,v1
        self.vertices=(v1,v2,v3)
        self.children=[]
        for v in self.vertices:
            v.add_incident(self)

    def __repr__(self):
        return "TriangleNode(%r,%r,%r)"%self.vertices

    @property
    def is_leaf(self):
        return len(self.children)==0

    def signed_area(self):
        v1,v2,v3=self.vertices
        return 0.5*predicates.det3_ones(v1.x,v1.y,v2.x,v2.y,v3.x,v3.y)

    def area(self):
        v1,v2,v3=self.vertices
        return predicates.triangle_area(v1.x,v1.y,v2.x,v2.y,v3.x,v3.y)

    def is_degenerate(self):
        return self.signed_area()==0.0

    def contains(self,p):
        """
        True if p is inside or on the boundary of this triangle.
        """
        if p is None:
            raise NullPointReference("Cannot test containment of None")
        t1,t2,t3=self.vertices
        return ( predicates.curl_z(p.x,p.y,t1.x,t1.y,t2.x,t2.y) <= 0 and
                 predicates.curl_z(p.x,p.y,t2.x,t2.y,t3.x,t3.y) <= 0 and
                 predicates.curl_z(p.x,p.y,t3.x,t3.y,t1.x,t1.y) <= 0 )

    def on_boundary(self,p):
        """
        True if p is collinear with one of the edges.  Together with
        contains(), true when p is on an edge or a vertex.
        """
        t1,t2,t3=self.vertices
        return ( predicates.curl_z(p.x,p.y,t1.x,t1.y,t2.x,t2.y) == 0 or
                 predicates.curl_z(p.x,p.y,t2.x,t2.y,t3.x,t3.y) == 0 or
                 predicates.curl_z(p.x,p.y,t3.x,t3.y,t1.x,t1.y) == 0 )

    def circumcenter(self):
        v1,v2,v3=self.vertices
        if self.is_degenerate():
            raise DegenerateTriangle("Circumcenter of collinear vertices %s"%(self,),
                                     triangle=self)
        return predicates.circumcenter(v1.x,v1.y,v2.x,v2.y,v3.x,v3.y)

    def child_containing(self,p):
        for c in self.children:
            if c.contains(p):
                return c
        return None

    def search(self,p):
        """
        Return the leaf below this node which contains p, or None if p
        is outside this triangle.
        """
        if p is None:
            raise NullPointReference("Cannot search for None")
        if not self.contains(p):
            return None
        leaf=self
        while leaf.children:
            leaf=leaf.child_containing(p)
            if leaf is None:
                self.log.warning("search: no child of a containing triangle contains %s"%(p,))
                return None
        return leaf

    def leaves(self):
        """
        generator for the distinct leaves below this node.
        """
        stack=[self]
        seen=set()
        while stack:
            t=stack.pop()
            if id(t) in seen:
                continue
            seen.add(id(t))
            if t.children:
                stack.extend(t.children)
            else:
                yield t

    def retire(self):
        for v in self.vertices:
            v.remove_incident(self)

    def activate(self):
        for v in self.vertices:
            v.add_incident(self)

    def insert(self,p):
        """
        Split this leaf into three children around p.
        """
        if self.children:
            raise InvariantViolation("Cannot insert into %s, it already has children"%(self,))
        self.retire()
        v0,v1,v2=self.vertices
        self.children=[TriangleNode(v0,v1,p),
                       TriangleNode(v1,v2,p),
                       TriangleNode(v2,v0,p)]

    def uninsert(self):
        """
        Undo insert(), removing the three children and reinstating this
        triangle.
        """
        if len(self.children)!=3:
            raise CannotUninsert("Can only uninsert from a triangle previously inserted into")
        for c in self.children:
            if c.children:
                raise CannotUninsert("Children have been split/flipped further, cannot undo")
        for c in self.children:
            c.retire()
        self.activate()
        self.children=[]

    def common_vertices(self,other):
        """ returns (common,unique), common in the order of self, unique
        with the vertices of self before the vertices of other.
        """
        common=[]
        unique=[]
        for v in self.vertices:
            if v in other.vertices:
                common.append(v)
            else:
                unique.append(v)
        for v in other.vertices:
            if v not in self.vertices:
                unique.append(v)
        return common,unique

    def flip_with(self,other):
        """
        self and other share an edge and form a quadrilateral.  Replace
        them with the two triangles using the other diagonal.  Both self
        and other get the same two children.
        """
        if other is None:
            raise NullPointReference("Cannot flip with None")
        common,unique=self.common_vertices(other)
        if len(unique)!=2 or len(common)!=2:
            raise InvariantViolation("Cannot flip triangles that do not share an edge (%d, %d)"%(len(unique),
                                                                                              len(common)))
        self.retire()
        other.retire()

        u0,u1=unique
        if predicates.is_clockwise(u0.x,u0.y,u1.x,u1.y,common[0].x,common[0].y):
            t3=TriangleNode(u0,u1,common[0])
            t4=TriangleNode(u1,u0,common[1])
        else:
            t3=TriangleNode(u0,u1,common[1])
            t4=TriangleNode(u1,u0,common[0])
        self.children=[t3,t4]
        other.children=[t3,t4]

    def unflip_with(self,other):
        if other is None:
            raise NullPointReference("Cannot unflip with None")
        if ( len(self.children)!=2 or len(other.children)!=2
             or not (self.children[0] is other.children[0] or self.children[0] is other.children[1]) ):
            raise CannotUnflip("Cannot unflip with triangle that was not created in the same flip operation")
        c1,c2=self.children
        if c1.children or c2.children:
            raise CannotUnflip("Cannot unflip triangles whose children have been split/flipped")
        c1.retire()
        c2.retire()
        self.activate()
        other.activate()
        self.children=[]
        other.children=[]

    def opposite_vertex(self,other):
        """
        The vertex of self which is not a vertex of other, or None
        """
        for v in self.vertices:
            if v not in other.vertices:
                return v
        return None

    def adjacent_across(self,va,vb):
        """
        The leaf other than self which has both va and vb as vertices,
        or None if va-vb is on the boundary.
        """
        for t in va.incident:
            if t is self:
                continue
            for t2 in vb.incident:
                if t2 is t:
                    return t
        return None

    def opposite_triangle(self,p):
        """
        p: a vertex of this triangle. Returns the triangle across the
        edge which doesn't contain p, or None.
        """
        v0,v1,v2=self.vertices
        if v0 is p:
            return self.adjacent_across(v1,v2)
        elif v1 is p:
            return self.adjacent_across(v0,v2)
        elif v2 is p:
            return self.adjacent_across(v0,v1)
        return None

    def is_delaunay_with(self,other):
        """
        True if the vertex of other opposite self is not strictly inside
        the circumcircle of self.
        """
        p=other.opposite_vertex(self)
        if p is None:
            return True
        if self.is_degenerate():
            # vertex inserted on an existing edge. The sliver has no
            # circumcircle and must be flipped away.
            return False
        a,b,c=self.vertices
        lenP=p.x*p.x + p.y*p.y
        return predicates.det3(a.x-p.x, a.y-p.y, a.x*a.x+a.y*a.y-lenP,
                               b.x-p.x, b.y-p.y, b.x*b.x+b.y*b.y-lenP,
                               c.x-p.x, c.y-p.y, c.x*c.x+c.y*c.y-lenP) >= 0
