from setuptools import setup, find_packages
from pathlib import Path

package_name = 'auto-cluster-operator'
description = (
    'A Kubernetes Operator that provisions Rancher clusters for Elemental '
    'machine inventories labelled with autoClusterName.'
)
license = 'MIT'
pypi_classifiers = [
    'Development Status :: 4 - Beta',
    'License :: OSI Approved :: MIT License',
    'Programming Language :: Python :: 3.10',
]
keywords = ['kubernetes', 'operator', 'rancher', 'elemental']
readme = Path(__file__).parent / 'README.rst'

# Core dependencies
install_requires = [
    'kopf>=1.37',
    'kubernetes>=28.1.0',
    'structlog>=23.1.0',
    'urllib3>=1.26',
]

# Test dependencies
tests_require = [
    'pytest>=7.4',
    'pyyaml>=6.0',
]
tests_require += install_requires

# Optional dependencies (like for dev)
extras_require = {
    # For development environments
    'dev': tests_require,
    'test': tests_require,
}

setup(
    name=package_name,
    description=description,
    long_description=readme.read_text(),
    license=license,
    classifiers=pypi_classifiers,
    keywords=keywords,
    package_dir={'': 'src'},
    packages=find_packages('src'),
    python_requires='>=3.10',
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        'console_scripts': [
            'auto-cluster-operator = autoclusteroperator.main:main',
        ],
    },
    use_scm_version={'fallback_version': '0.1.0'},
)
