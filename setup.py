import os
import re

from setuptools import setup, find_packages

with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'passboltprovider', '__init__.py')) as fd:
    __version__ = re.search(r"^__version__ = '([^']+)'", fd.read(), re.M).group(1)

install_requires = [
    'certifi',
    'requests>=2.31.0',
    'tabulate',
    'urllib3',
    'PGPy>=0.6.0; python_version<"3.13"',
    'PGPy13; python_version>="3.13"',
]

if __name__ == '__main__':
    setup(
        name='passbolt-provider',
        version=__version__,
        description='Passbolt folder and password provider with a JSON command line interface',
        python_requires='>=3.8',
        packages=find_packages(include=['passboltprovider', 'passboltprovider.*']),
        install_requires=install_requires,
        extras_require={
            'test': ['pytest'],
        },
        entry_points={
            'console_scripts': [
                'passbolt-provider=passboltprovider.__main__:main',
            ],
        },
    )
