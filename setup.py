import os
from setuptools import setup, find_namespace_packages
from setuptools.command.build_py import build_py as _build

CLASSIFIERS = [
    'Operating System :: POSIX',
    'Operating System :: MacOS :: MacOS X',
    'Intended Audience :: Science/Research',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Topic :: Scientific/Engineering'
]

PYDIR = 'python'

def get_version():
    out = "0.0.dev0"
    pkgdir = os.environ.get('PACKAGE_DIR', os.path.dirname(os.path.abspath(__file__)))
    versfile = os.path.join(pkgdir, 'VERSION')
    if os.path.exists(versfile):
        with open(versfile) as fd:
            parts = fd.readline().split()
        if len(parts) > 0:
            out = parts[-1]
    return out

def write_version_mod(version):
    confluxdir = os.path.join(PYDIR, 'conflux')
    for pkg in [f for f in os.listdir(confluxdir) \
                  if not f.startswith('_') and not f.startswith('.')
                     and os.path.isdir(os.path.join(confluxdir, f))]:
        versmodf = os.path.join(confluxdir, pkg, "version.py")
        with open(versmodf, 'w') as fd:
            fd.write('"""')
            fd.write("""
An identification of the subsystem version.  Note that this module file gets
(over-) written by the build process.
""")
            fd.write('"""\n\n')
            fd.write('__version__ = "')
            fd.write(version)
            fd.write('"\n')

class build(_build):

    def run(self):
        write_version_mod(get_version())
        _build.run(self)

setup(name='conflux.raid',
      version=get_version(),
      description="conflux.raid: RAiD compatibility checking and metadata mapping for Conflux projects",
      package_dir={'': PYDIR},
      packages=find_namespace_packages(where=PYDIR, include=['conflux.*']),
      install_requires=[ "requests", "PyYAML" ],
      extras_require={ "test": [ "pytest" ] },
      entry_points={ "console_scripts": [ "conflux-raid=conflux.raid.cli:main" ] },
      cmdclass={'build_py': build},
      classifiers=CLASSIFIERS,
      python_requires=">=3.8",
      zip_safe=False
)
