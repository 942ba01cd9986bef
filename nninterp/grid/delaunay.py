# Incremental Delaunay triangulation over a hierarchical triangle tree.
# Points are located by descending the tree of split and flipped
# triangles, inserted by splitting the containing leaf, and the
# Delaunay criterion is restored by a cascade of edge flips.  Every
# insertion through add_point() can be undone exactly.
import logging
import threading

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from .. import undoer
from ..utils import bounds, dist, set_keywords
from .tri_tree import (Vertex, TriangleNode, TriangulationError, NullPointReference,
                       OutOfBounds, DuplicatePoint, DegenerateTriangle,
                       InvariantViolation, CannotUninsert, CannotUnflip, AlreadyReverted)

log=logging.getLogger(__name__)


def vertices_from_xy(xy,values=None,shuffle=True,seed=None):
    """
    xy: [N,2] coordinates
    values: [N] values, defaults to zero
    Returns ([Vertex,...] in the order of xy, the same vertices in
    insertion order).  With shuffle the insertion order is random,
    which keeps the triangle tree shallow.
    """
    xy=np.asarray(xy,np.float64)
    if values is None:
        values=np.zeros(len(xy))
    values=np.asarray(values)
    if len(values)!=len(xy):
        raise ValueError("Got %d points but %d values"%(len(xy),len(values)))

    verts=[Vertex(x,y,v) for (x,y),v in zip(xy,values)]
    order=np.arange(len(verts))
    if shuffle:
        np.random.RandomState(seed).shuffle(order)
    return verts,[verts[i] for i in order]


class UndoAction(undoer.OpHistory):
    """
    Reverts one add_point() call.  Call it with no arguments.
    """
    RevertError=AlreadyReverted
    log=log


class Triangulation(object):
    """
    Delaunay triangulation of a set of Vertex instances, held as the
    leaves of a tree below a single bounding triangle.

    Not thread-safe in general, but add_point() and the undo actions it
    returns hold self.lock, so a caller can serialize other access on
    the same lock.
    """
    # local exception types
    TriangulationError=TriangulationError
    NullPointReference=NullPointReference
    OutOfBounds=OutOfBounds
    DuplicatePoint=DuplicatePoint
    DegenerateTriangle=DegenerateTriangle
    InvariantViolation=InvariantViolation
    CannotUninsert=CannotUninsert
    CannotUnflip=CannotUnflip

    post_check=False # enables [expensive] checks after each insertion
    dup_tol=0.0 # points this close to an existing vertex are rejected as duplicates
    min_span=1.0 # half-span of the bounding triangle when the points have no extent
    bounding_pad=0.01 # relative padding of the half-span

    log=log

    def __init__(self,points=(),**kwargs):
        """
        points: sequence of Vertex.  Insertion order shapes the tree, so
        randomly ordered points give a shallower tree.
        """
        set_keywords(self,kwargs)
        self.lock=threading.RLock()
        points=list(points)
        self.root=self.bounding_triangle(points)
        self.corners=self.root.vertices

        for p in points:
            self._add_point(p,undoable=False)
        self.log.info("Triangulated %d points"%len(points))

    @classmethod
    def from_xy(cls,xy,values=None,shuffle=True,seed=None,**kwargs):
        """
        xy: [N,2] coordinates
        values: [N] values, defaults to zero
        shuffle: insert in random order.  The returned vertices are
          in the original order regardless.
        Returns (triangulation, [Vertex,...])
        """
        verts,ordered=vertices_from_xy(xy,values,shuffle=shuffle,seed=seed)
        return cls(ordered,**kwargs),verts

    def bounding_triangle(self,points):
        """
        A triangle containing the bounding box of points with some margin.
        """
        if len(points):
            xy=np.array([ [p.x,p.y] for p in points])
            (xmin,ymin),(xmax,ymax)=bounds(xy)
        else:
            xmin=ymin=xmax=ymax=0.0
        cx=(xmin+xmax)/2.
        cy=(ymin+ymax)/2.
        s=max(xmax-xmin,ymax-ymin)/2.
        if s<=0:
            s=self.min_span
        # without padding, two corners of a square bounding box land
        # exactly on edges of the triangle
        s*=1+self.bounding_pad
        return TriangleNode(Vertex(cx,cy+3*s,synthetic=True),
                            Vertex(cx+3*s,cy,synthetic=True),
                            Vertex(cx-3*s,cy-3*s,synthetic=True))

    def locate(self,p):
        """
        Leaf triangle containing p, or raise OutOfBounds.  Points on the
        boundary of the root are out of bounds.
        """
        if p is None:
            raise self.NullPointReference("Cannot insert None")
        leaf=self.root.search(p)
        if leaf is None or self.root.on_boundary(p):
            raise self.OutOfBounds("Point (%f,%f) does not lie within bounds"%(p.x,p.y),
                                   point=p)
        return leaf

    def add_point(self,p):
        """
        Insert vertex p, restoring the Delaunay criterion.
        Returns an undo action, which when called removes p again.
        Pending undo actions must be called in reverse order.
        """
        with self.lock:
            return self._add_point(p,undoable=True)

    def _add_point(self,p,undoable):
        leaf=self.locate(p)
        self.check_duplicate(p,leaf)

        if undoable:
            undo=UndoAction(lock=self.lock)
        else:
            undo=None

        leaf.insert(p)
        if undo is not None:
            undo.push_op(leaf.uninsert)

        # Check each of the new triangles for being locally delaunay,
        # and any triangles created by flips.
        to_check=list(p.incident)
        i=0
        while i<len(to_check):
            t1=to_check[i]
            i+=1
            t2=t1.opposite_triangle(p)
            if t2 is None:
                continue # boundary of the bounding triangle
            if t1.is_delaunay_with(t2):
                continue
            self.log.debug("Flipping %s with %s",t1,t2)
            t1.flip_with(t2)
            if undo is not None:
                undo.push_op(t1.unflip_with,t2)
            to_check.extend(t1.children)

        if self.post_check:
            bad=self.check_local_delaunay()
            if bad:
                raise self.InvariantViolation("Delaunay criterion violated after inserting %s"%(p,))
        return undo

    def check_duplicate(self,p,leaf):
        for v in leaf.vertices:
            if dist([v.x,v.y],[p.x,p.y])<=self.dup_tol:
                raise self.DuplicatePoint("%s coincides with existing %s"%(p,v),
                                          point=p,vertex=v)

    def leaves(self):
        return self.root.leaves()

    def vertices(self,include_bounding=False):
        """
        list of distinct vertices in the live triangulation.
        include_bounding: include the three synthetic corners.
        """
        seen=set()
        result=[]
        for t in self.leaves():
            for v in t.vertices:
                if id(v) in seen:
                    continue
                seen.add(id(v))
                if not include_bounding and v in self.corners:
                    continue
                result.append(v)
        return result

    def to_arrays(self,include_bounding=False):
        """
        Returns xy [N,2], values [N], triangles [M,3] of indices into xy,
        with triangles in CCW order as matplotlib expects.
        Without include_bounding, triangles touching a bounding corner
        are omitted.
        """
        verts=self.vertices(include_bounding=include_bounding)
        index={id(v):i for i,v in enumerate(verts)}
        tris=[]
        for t in self.leaves():
            try:
                tri=[index[id(v)] for v in t.vertices]
            except KeyError:
                continue
            tris.append(tri[::-1])
        xy=np.array([ [v.x,v.y] for v in verts]).reshape([-1,2])
        values=np.array([v.value for v in verts])
        return xy,values,np.array(tris,np.int32).reshape([-1,3])

    def edges(self,include_bounding=False):
        """ [N,2,2] segments of the live triangulation """
        segs={}
        for t in self.leaves():
            for i in range(3):
                a=t.vertices[i]
                b=t.vertices[(i+1)%3]
                if not include_bounding and (a in self.corners or b in self.corners):
                    continue
                key=frozenset([id(a),id(b)])
                segs[key]=[ [a.x,a.y],[b.x,b.y] ]
        return np.array(list(segs.values()),np.float64).reshape([-1,2,2])

    # validation
    def check_local_delaunay(self):
        """ Check both sides of each interior edge.
        Returns a list of (triangle,neighbor) pairs which fail.
        """
        bad_checks=[]
        for t in self.leaves():
            for v in t.vertices:
                nbr=t.opposite_triangle(v)
                if nbr is None:
                    continue
                if not t.is_delaunay_with(nbr):
                    self.log.error("%s is not delaunay with %s"%(t,nbr))
                    bad_checks.append( (t,nbr) )
        return bad_checks

    def check_orientations(self):
        """
        Checks all leaves for CW orientation, return a list of failures.
        Degenerate triangles count as failures.
        """
        return [t for t in self.leaves() if t.signed_area()>=0]

    def check_incidence(self):
        """
        Check the vertex->triangle back index against the leaves.
        Returns a list of error messages, empty when consistent.
        """
        errors=[]
        leaves=list(self.leaves())
        leaf_ids=set(id(t) for t in leaves)
        for t in leaves:
            for v in t.vertices:
                if sum(1 for t2 in v.incident if t2 is t)!=1:
                    errors.append("%s should list %s exactly once"%(v,t))
        for v in self.vertices(include_bounding=True):
            for t in v.incident:
                if id(t) not in leaf_ids:
                    errors.append("%s lists retired %s"%(v,t))
                elif v not in t.vertices:
                    errors.append("%s lists %s which does not use it"%(v,t))
        for msg in errors:
            self.log.error(msg)
        return errors

    def plot_edges(self,ax=None,include_bounding=False,lw=0.8,**kwargs):
        """
        plot edges as a LineCollection.
        Returns the LineCollection.
        """
        ax = ax or plt.gca()
        segs=self.edges(include_bounding=include_bounding)
        lcoll=LineCollection(segs,lw=lw,**kwargs)
        ax.add_collection(lcoll)
        if len(segs):
            ax.axis([segs[...,0].min(),segs[...,0].max(),
                     segs[...,1].min(),segs[...,1].max()])
        return lcoll
