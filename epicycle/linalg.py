# This file is part of epicycle,  distributed under license LGPL v3

''' Dense linear algebra used by the velocity solver.

	The systems solved here are small (a few dozen unknowns at most) so everything is done on dense numpy arrays, with an explicit elimination rather than `numpy.linalg` because the solver needs to control the pivot tolerance used to decide the rank.
'''

import numpy as np

from . import settings

__all__ = ['gauss_solve', 'rank', 'lstsq', 'augment']


def gauss_solve(a, b, tolerance=None) -> np.ndarray:
	''' Solve the square system `a @ x = b` by Gauss-Jordan elimination with partial pivoting

		Columns whose best pivot is below `tolerance` are skipped, their unknown is then left to the value the elimination gives (usually 0), this makes the function tolerant to singular systems instead of raising.

		Parameters:
			a:	square matrix `(n,n)`
			b:	right hand side `(n,)`
			tolerance:	pivot magnitude under which a column is skipped, defaults to `settings.solver['singular_tolerance']`
	'''
	if tolerance is None:	tolerance = settings.solver['singular_tolerance']
	a = np.asarray(a, float)
	n = len(a)
	m = np.concatenate([a, np.asarray(b, float).reshape(n,1)], axis=1)
	for c in range(n):
		pivot = c + int(np.argmax(np.abs(m[c:,c])))
		if abs(m[pivot,c]) < tolerance:
			continue
		if pivot != c:
			m[[c,pivot]] = m[[pivot,c]]
		m[c,c:] /= m[c,c]
		for r in range(n):
			if r != c and m[r,c] != 0:
				m[r,c:] -= m[r,c] * m[c,c:]
	return m[:,n].copy()

def rank(m, tolerance=None) -> int:
	''' Rank of the given matrix, by row reduction with partial pivoting

		Parameters:
			m:	matrix `(rows, columns)`, possibly empty
			tolerance:	pivot magnitude under which a column is considered dependent, defaults to `settings.solver['pivot_tolerance']`
	'''
	if tolerance is None:	tolerance = settings.solver['pivot_tolerance']
	m = np.array(m, float)
	if m.ndim != 2 or m.size == 0:
		return 0
	rows, columns = m.shape
	r = c = 0
	while r < rows and c < columns:
		pivot = r + int(np.argmax(np.abs(m[r:,c])))
		if abs(m[pivot,c]) < tolerance:
			c += 1
			continue
		if pivot != r:
			m[[r,pivot]] = m[[pivot,r]]
		m[r,c:] /= m[r,c]
		for i in range(rows):
			if i != r:
				m[i,c:] -= m[i,c] * m[r,c:]
		r += 1
		c += 1
	return r

def lstsq(a, b) -> np.ndarray:
	''' Least squares solution of `a @ x = b` through the normal equations `(aᵗa) x = aᵗb`

		Redundant rows are handled naturally, which is the common case for the kinematic systems.
	'''
	a = np.asarray(a, float)
	b = np.asarray(b, float)
	at = a.transpose()
	return gauss_solve(at @ a, at @ b)

def augment(a, b) -> np.ndarray:
	''' Augmented matrix `[a|b]` '''
	a = np.asarray(a, float)
	return np.concatenate([a, np.asarray(b, float).reshape(len(a),1)], axis=1)
