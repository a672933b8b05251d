# #!/usr/bin/env python

"""setup.py script for py_interceptcalc library"""

from setuptools import setup, find_packages

setup(
    name='py_interceptcalc',
    version='1.0.0',
    description='Launch direction solver for intercepting moving targets with drag-affected projectiles',
    license='LGPL-3.0-only',
    python_requires='>=3.9',
    packages=find_packages(include=['py_interceptcalc', 'py_interceptcalc.*']),
    install_requires=[
        'typing_extensions>=4.12.0',
        'tomli>=2.0.0; python_version<"3.11"',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'py_interceptcalc': [
            'drag_engine = py_interceptcalc.engines.drag:DragInterceptEngine',
            'quadratic_engine = py_interceptcalc.engines.quadratic:QuadraticInterceptEngine',
        ],
        'console_scripts': [
            'pyic = py_interceptcalc.__main__:main',
        ],
    },
)
