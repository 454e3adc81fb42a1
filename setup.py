"""Setup script for StreetSim package."""

from setuptools import find_packages, setup

setup(
    name='streetsim',
    version='0.1.0',
    author='StreetSim Team',
    author_email='example@example.com',
    description='A simulation of residents and vehicles moving through a street layout',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',
    url='https://github.com/example/streetsim',
    packages=find_packages(include=['streetsim', 'streetsim.*']),
    include_package_data=True,
    package_data={
        'streetsim.config': ['*.yaml'],
        'streetsim.data': ['*.json'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'PyYAML',
    ],
    extras_require={
        'dev': [
            'pytest',
            'flake8',
            'black',
        ],
    },
)
