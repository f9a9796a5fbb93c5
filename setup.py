#!/usr/bin/python3

from setuptools import setup, find_packages

setup(
	# package declaration
	name='epicycle',
	version='0.3.1',
	python_requires='>=3.8',
	install_requires=[
		'pyglm>=2.5.5',
		'numpy>=1.1',
		'scipy>=1.3',
		'pyyaml>=5',
		],
	extras_require={
		'test': ['pytest>=6'],
		},
	# source declaration
	packages=find_packages(include=['epicycle', 'epicycle.*']),

	# metadata for pypi
	description="Kinematics, assemblability and phasing of planetary gear trains",
	long_description="Compute the velocities, the assemblability and the static gear phases of compound planetary gear trains described as stages of sun, planets and ring.",
	license='GNU LGPL v3',
	keywords='gear planetary epicyclic transmission kinematic solver',
	classifiers=[
		'Topic :: Scientific/Engineering',
		'Development Status :: 3 - Alpha',
		'Programming Language :: Python :: 3.8',
		'Programming Language :: Python :: 3.9',
		'Programming Language :: Python :: 3.10',
		'Programming Language :: Python :: Implementation :: CPython',
		'License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)',
		'Intended Audience :: Science/Research',
		'Intended Audience :: Manufacturing',
		'Intended Audience :: Education',
		],
	)
