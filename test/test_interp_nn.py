import numpy as np
from scipy.spatial import Voronoi

from nninterp.grid.tri_tree import Vertex
from nninterp.spatial import interp_nn
from nninterp.utils import signed_area

def pentagon(values):
    return [ Vertex(10*np.sin(i*2*np.pi/5),
                    10*np.cos(i*2*np.pi/5),
                    values[i])
             for i in range(5)]

def cloud(n=200,seed=1):
    xy=np.random.RandomState(seed).uniform(0,10,size=(n,2))
    values=1.0+2*xy[:,0]-3*xy[:,1]
    return xy,values

def test_pentagon():
    values=[2.0,3.0,5.0,7.0,11.0]
    interp=interp_nn.Interpolator(pentagon(values))
    result=interp.interpolate(0,0)
    expected=(2.0+3.0+5.0+7.0+11.0)/5.0
    assert abs(result-expected)<1e-8

def test_weights_sum():
    xy,values=cloud()
    interp=interp_nn.Interpolator.from_xy(xy,values,seed=2)
    for x,y in np.random.RandomState(3).uniform(2,8,size=(20,2)):
        nbrs,weights=interp.nn_weights(x,y)
        assert len(nbrs)>=3
        assert np.all(weights>=0)
        assert np.allclose(weights.sum(),1.0)
        assert not any(n.synthetic for n in nbrs)

def test_linear_precision():
    xy,values=cloud()
    interp=interp_nn.Interpolator.from_xy(xy,values,seed=4)
    dst=np.random.RandomState(5).uniform(4,6,size=(25,2))
    result=interp.interpolate_many(dst)
    expected=1.0+2*dst[:,0]-3*dst[:,1]
    assert np.allclose(result,expected,atol=1e-8)

def test_at_data_point():
    xy,values=cloud(50)
    interp=interp_nn.Interpolator.from_xy(xy,values,seed=6)
    assert interp.interpolate(xy[7,0],xy[7,1])==values[7]

def test_outside_hull():
    xy,values=cloud(50)
    interp=interp_nn.Interpolator.from_xy(xy,values,seed=7)
    # outside the data, but inside the bounding triangle
    nbrs,weights=interp.nn_weights(11.0,5.0)
    assert np.allclose(weights.sum(),1.0)
    val=interp.interpolate(11.0,5.0)
    assert values.min()<=val<=values.max()

def test_out_of_bounds():
    xy,values=cloud(50)
    interp=interp_nn.Interpolator.from_xy(xy,values,seed=8)
    n_leaves=len(list(interp.tri.leaves()))
    try:
        interp.interpolate(1000.,1000.)
        assert False
    except interp.tri.OutOfBounds:
        pass
    assert len(list(interp.tri.leaves()))==n_leaves

def unit_square_interp(**kw):
    xy=np.array([[0,0],[1,0],[0,1],[1,1]],np.float64)
    return interp_nn.Interpolator.from_xy(xy,[1.0,2.0,3.0,4.0],seed=0,**kw)

def test_bounding_corner():
    interp=unit_square_interp()
    for a in interp.tri.root.vertices:
        try:
            interp.interpolate(a.x,a.y)
            assert False
        except interp.tri.OutOfBounds:
            pass
    assert interp.tri.check_incidence()==[]

def test_near_bounding_corner():
    # with a loose tolerance a point near a corner matches the corner,
    # which has no value to return
    interp=unit_square_interp(dup_tol=0.5)
    a=interp.tri.root.vertices[0]
    center=np.mean([v.xy for v in interp.tri.root.vertices],axis=0)
    x,y=a.xy+0.01*(center-a.xy)
    try:
        interp.interpolate(x,y)
        assert False
    except interp.tri.OutOfBounds:
        pass
    assert interp.tri.check_incidence()==[]

def test_probe_leaves_no_trace():
    xy,values=cloud(50)
    interp=interp_nn.Interpolator.from_xy(xy,values,seed=9)
    before=sorted( (id(v),len(v.incident)) for v in interp.tri.vertices(include_bounding=True))
    interp.interpolate_many(np.random.RandomState(10).uniform(1,9,size=(30,2)))
    after=sorted( (id(v),len(v.incident)) for v in interp.tri.vertices(include_bounding=True))
    assert before==after
    assert interp.tri.check_incidence()==[]

def cell_area(vor,i):
    """ area of the cell of input point i, vertices sorted by angle
    about the site since the cell is convex and contains it.
    """
    pts=vor.vertices[vor.regions[vor.point_region[i]]]
    d=pts-vor.points[i]
    pts=pts[np.argsort(np.arctan2(d[:,1],d[:,0]))]
    return abs(signed_area(pts))

def scipy_weights(src_xy,dst_xy):
    """ area stolen from each source cell, via scipy Voronoi with
    far away dummy points to bound the cells.
    """
    center=src_xy.mean(axis=0)
    pad=100*(src_xy.max(axis=0)-src_xy.min(axis=0)).max()
    dummies=np.array( [[center[0]-pad,center[1]-pad],
                       [center[0]+pad,center[1]-pad],
                       [center[0]-pad,center[1]+pad],
                       [center[0]+pad,center[1]+pad]] )
    vor1=Voronoi(np.concatenate([src_xy,dummies]))
    vor2=Voronoi(np.concatenate([src_xy,dummies,[dst_xy]]))
    weights=np.zeros(len(src_xy))
    for i in range(len(src_xy)):
        area1=cell_area(vor1,i)
        area2=cell_area(vor2,i)
        weights[i]=max(area1-area2,0.0)
    return weights/weights.sum()

def test_matches_scipy_voronoi():
    xy,values=cloud(100,seed=11)
    points=[Vertex(x,y,v) for (x,y),v in zip(xy,values)]
    index={id(p):i for i,p in enumerate(points)}
    interp=interp_nn.Interpolator(points)
    for dst in np.random.RandomState(12).uniform(3,7,size=(10,2)):
        nbrs,weights=interp.nn_weights(dst[0],dst[1])
        ours=np.zeros(len(points))
        for n,w in zip(nbrs,weights):
            ours[index[id(n)]]=w
        theirs=scipy_weights(xy,dst)
        assert np.allclose(ours,theirs,atol=1e-8)

def test_nn_interpolate():
    xy,values=cloud(100,seed=13)
    val=interp_nn.nn_interpolate(xy,values,[5.0,5.0])
    assert np.ndim(val)==0
    assert np.allclose(val,1.0+2*5-3*5)
    vals=interp_nn.nn_interpolate(xy,values,[[5.0,5.0],[4.0,6.0]])
    assert vals.shape==(2,)
