"""
Setup configuration for the signal-quality verification engine.
"""

from setuptools import setup, find_packages

setup(
    name='signal-quality-verification',
    version='1.0.0',
    description='Offline click, distortion and aliasing verification for DSP output',
    author='Low Latency Translate Team',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.11',
    install_requires=[
        'numpy>=1.24.0',
        'scipy>=1.10.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-cov>=4.1.0',
            'pylint>=2.17.0',
            'flake8>=6.0.0',
            'black>=23.0.0',
            'mypy>=1.4.0',
        ]
    }
)
