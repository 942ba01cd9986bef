import numpy as np


def bounds(pnts):
    """
    returns array [{lower,upper},pnts.shape[-1]]
    """
    lower=pnts
    upper=pnts

    while lower.ndim> 1:
        lower=lower.min(axis=0)
        upper=upper.max(axis=0)
    return np.array([lower,upper])

def mag(vec):
    vec = np.asarray(vec)
    return np.sqrt( (vec**2).sum(axis=-1))

def dist(a,b=None):
    if b is not None:
        a=np.asarray(a)-np.asarray(b)
    return mag(a)

def signed_area(points):
    """
    Shoelace area of the polygon [N,2] points.  Positive for CCW
    ordering.
    """
    points=np.asarray(points)
    if points.shape[0]<3:
        return 0.0
    i = np.arange(points.shape[0])
    ip1 = (i+1)%(points.shape[0])
    return 0.5*(points[i,0]*points[ip1,1] - points[ip1,0]*points[i,1]).sum()

def set_keywords(obj,kw):
    """
    Utility for __init__ methods to update object state with
    keyword arguments.  Checks that the attributes already
    exist, to avoid spelling mistakes.  Uses getattr and
    setattr for compatibility with properties.
    """
    for k in kw:
        try:
            getattr(obj,k)
        except AttributeError:
            raise Exception("Setting attribute %s failed because it doesn't exist on %s"%(k,obj))
        setattr(obj,k,kw[k])
