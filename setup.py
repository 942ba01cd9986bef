from setuptools import setup

setup(
    name='nninterp',
    version='0.1',
    packages=['nninterp', 'nninterp.grid', 'nninterp.spatial'],
    install_requires=['numpy', 'matplotlib'],
    extras_require={'test': ['pytest', 'scipy']},
    python_requires='>=3.7',
    license='MIT',
    description='Incremental Delaunay triangulation with undo, and natural neighbor interpolation',
    long_description=open('README.md').read(),
)
