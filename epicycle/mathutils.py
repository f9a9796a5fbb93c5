# This file is part of epicycle,  distributed under license LGPL v3

''' Group of functions and math types used by epicycle '''

from glm import dvec2, length, distance
from math import pi, atan2, floor, cos, sin, acos

# alias definitions
vec2 = dvec2

# full turn
TAU = 2*pi


def mod2pi(angle) -> float:
	''' Reduce an angle to the interval `[0, 2π)` '''
	return ((angle % TAU) + TAU) % TAU

def roundhalf(x) -> int:
	''' Round to the nearest integer, halves being rounded up (unlike python's `round`) '''
	return floor(x + 0.5)

def rotate2(v:vec2, angle) -> vec2:
	''' Rotate a 2D vector counterclockwise around the origin '''
	c, s = cos(angle), sin(angle)
	return vec2(v[0]*c - v[1]*s, v[0]*s + v[1]*c)

def polar(v:vec2) -> float:
	''' Angle of a 2D vector with the x axis, in `(-π, π]` '''
	return atan2(v[1], v[0])


#-- algorithmic functions ---------

def fbisect(f, start, stop, prec=None, steps=None):
	''' bisection over the parameter of a continuous real function, returning the place where the function switches from True to False
		f(x) -> bool
		
		when `steps` is given, exactly this number of halvings is done regardless of `prec`
	'''
	if not prec:	prec = abs(stop-start)*1e-3
	
	if not f(start):	return start
	elif f(stop):		return stop

	k = 0
	while (k < steps) if steps else (abs(stop-start) > prec):
		x = (start+stop)*0.5
		if f(x):	start = x
		else:		stop = x
		k += 1
	return start
