from setuptools import setup
import sys


if sys.version_info[:2] < (3, 5):
    raise RuntimeError(
        "You're using Python < 3.5, but this package requires Python 3.5 or "
        "above, so you can't use it unless you upgrade your Python version."
    )

dependencies = ['llfuse']

extras = {
    'docs': ['sphinx'],
    'testing': ['pytest', 'flake8', 'pep8-naming', 'flake8_docstrings'],
}

extras['all'] = list(set([req for reqs in extras.values() for req in reqs]))


setup(name='scratchfs',
      version='0.0.1',
      author='The scratchfs developers',
      description='A volatile in-memory FUSE file system',
      long_description=open('README.rst').read(),
      packages=['scratchfs'],
      license='MIT',
      install_requires=dependencies,
      extras_require=extras,
      entry_points={
          'console_scripts': ['scratchfs = scratchfs.__main__:main'],
      },
      classifiers=[
          'Development Status :: 2 - Pre-Alpha',
          'Environment :: Console',
          'Intended Audience :: Developers',
          'License :: OSI Approved :: MIT License',
          'Operating System :: POSIX :: Linux',
          'Programming Language :: Python',
          'Programming Language :: Python :: 3',
          'Topic :: Software Development :: Libraries :: Python Modules',
          'Topic :: System :: Filesystems',
      ]
      )
