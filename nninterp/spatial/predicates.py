# Geometric primitives on scalar coordinates.
# These are plain float expressions, not robust predicates.  Triangles
# in the triangle tree are stored clockwise, so most signs below are
# interpreted with that convention.

def det2(a,b,c,d):
    """ determinant of [[a,b],[c,d]] """
    return a*d - b*c

def det3(a,b,c,d,e,f,g,h,i):
    """ determinant of [[a,b,c],[d,e,f],[g,h,i]] """
    return a*(e*i-f*h) - b*(d*i-f*g) + c*(d*h-e*g)

def det3_ones(a,b,d,e,f,g):
    """
    determinant of a 3x3 matrix with a column of ones, i.e.
    det3(a,b,1, d,e,1, f,g,1).  Twice the signed area of the
    triangle (a,b),(d,e),(f,g), positive for CCW.
    """
    return (d-a)*(g-b) + (b-e)*(f-a)

def curl_z(p1x,p1y,p2x,p2y,p3x,p3y):
    """
    z component of the cross product of (p1-p3) and (p2-p3).
    Negative when p1->p2 turns clockwise about p3.
    """
    return (p1x-p3x)*(p2y-p3y) - (p2x-p3x)*(p1y-p3y)

def is_clockwise(p1x,p1y,p2x,p2y,p3x,p3y):
    return det3_ones(p1x,p1y,p2x,p2y,p3x,p3y) < 0

def triangle_area(p1x,p1y,p2x,p2y,p3x,p3y):
    return 0.5*abs(det3_ones(p1x,p1y,p2x,p2y,p3x,p3y))

def circumcenter(p1x,p1y,p2x,p2y,p3x,p3y):
    """
    Circumcenter of the three points, as (x,y).  Collinear points give
    a zero denominator, which the caller has to check for.
    """
    m1=p1x*p1x + p1y*p1y
    m2=p2x*p2x + p2y*p2y
    m3=p3x*p3x + p3y*p3y
    f=1.0/(2*det3_ones(p1x,p1y,p2x,p2y,p3x,p3y))
    x=f*det3_ones(m1,p1y,m2,p2y,m3,p3y)
    y=-f*det3_ones(m1,p1x,m2,p2x,m3,p3x)
    return x,y
