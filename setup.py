from setuptools import setup, find_packages
from codecs import open
from os import path


here = path.abspath(path.dirname(__file__))


with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

with open(path.join(here, 'exerciseviewer', '__init__.py')) as pkg:
    __version__ = eval(pkg.readline().split('=')[1])


setup(
    name='exerciseviewer',
    version=__version__,
    description='Polar and Garmin exercise file decoders',
    long_description=long_description,
    license='GPL-2.0',
    keywords='exercise cycling running polar garmin fit hrm tcx',

    # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Medical Science Apps.',
        'License :: OSI Approved :: GNU General Public License v2 (GPLv2)',
        'Programming Language :: Python :: 3',
    ],

    packages=find_packages(exclude=['*.test']),
    install_requires=[
        'numpy>=1.11.1',
        'pandas>=0.18.1',
        'pytz>=2011',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
