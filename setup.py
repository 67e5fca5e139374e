from setuptools import setup, find_packages

with open('README.md') as f:
    long_description = f.read()

with open('requirements.txt') as f:
    requirements = f.read().splitlines()

setup(
    name='repet',
    version='0.1.0',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: Education',
        'Intended Audience :: Science/Research',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia',
        'Topic :: Multimedia :: Sound/Audio',
        'Topic :: Multimedia :: Sound/Audio :: Analysis',
        'Topic :: Software Development :: Libraries',
    ],
    description='Repeating pattern extraction (REPET) for background/foreground separation.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',
    packages=find_packages(exclude=['tests', 'tests.*']),
    keywords=['audio', 'source', 'separation', 'music', 'sound', 'repet', 'beat spectrum'],
    install_requires=requirements,
    extras_require={
        'tests': [
            'pytest'
        ],
    }
)
