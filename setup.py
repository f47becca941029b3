#!/usr/bin/env python

"""Set up the pypgstream PostgreSQL driver package.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

This package can be installed using pip as follows:

    pip install pypgstream

To install with the test tools:

    pip install 'pypgstream[test]'

libpq is provided by the psycopg binary distribution; no PostgreSQL client
installation is needed.
"""

import os
import re

from setuptools import setup

with open(os.path.join(os.path.dirname(__file__), 'pypgstream', '__init__.py')) as v:
    m = re.search(r"^ *__version__ *= *'(.*?)'", v.read(), re.M)
    if m is None:
        raise RuntimeError("Cannot detect version in pypgstream/__init__.py")
    VERSION = m.group(1)

readme = os.path.join(os.path.dirname(__file__), 'README.rst')

setup(
    name='pypgstream',
    version=VERSION,
    author='pypgstream developers',
    description='Streaming PostgreSQL driver with vectorized parameters',
    keywords='postgresql libpq streaming database driver',
    packages=['pypgstream'],
    license='BSD License',
    long_description=open(readme).read(),
    python_requires='>=3.9',
    install_requires=['psycopg[binary]>=3.1', 'tzlocal>=4.0'],
    extras_require=dict(test=['pytest>=7.0']),
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: SQL',
        'Topic :: Database :: Front-Ends',
    ],
)
