from setuptools import setup, find_packages

setup(
    name='pairing_heap',
    version='0.2.0',
    description='Persistent pairing heap with min, max and comparator orderings',
    license='MIT',
    packages=find_packages(exclude=['tests']),
    python_requires='>=3.6',
    install_requires=[
        'click',
        'tqdm',
        'numpy',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'pairing-heap = pairing_heap.main:cli',
        ],
    },
)
