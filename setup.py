from setuptools import setup

with open("README.md", 'r') as f:
    long_description = f.read()

setup(
    name='dfamatch',
    version='0.1.0',
    description='Table-driven finite automaton matcher',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Paolo Bonzini',
    author_email='bonzini@gnu.org',
    packages=['dfamatch', 'dfamatch.automata', 'dfamatch.cli'],
    install_requires=[
        'compynator'
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'dfamatch = dfamatch.cli.main:main',
        ]
    }
)
