import numpy as np

from nninterp import utils

def test_bounds():
    pnts=np.array([[0,5],[3,-1],[2,2]],np.float64)
    (xmin,ymin),(xmax,ymax)=utils.bounds(pnts)
    assert (xmin,ymin,xmax,ymax)==(0,-1,3,5)

def test_dist():
    assert utils.dist([0,0],[3,4])==5.0
    assert np.allclose(utils.dist(np.array([[3,4],[0,1]])),[5,1])

def test_signed_area():
    square=np.array([[0,0],[2,0],[2,2],[0,2]])
    assert utils.signed_area(square)==4.0
    assert utils.signed_area(square[::-1])==-4.0
    # not a polygon
    assert utils.signed_area(square[:2])==0.0

def test_set_keywords():
    class Thing(object):
        size=1
    t=Thing()
    utils.set_keywords(t,dict(size=3))
    assert t.size==3
    try:
        utils.set_keywords(t,dict(sise=3))
        assert False,"Should have raised on a misspelled attribute"
    except Exception as exc:
        assert 'sise' in str(exc)
