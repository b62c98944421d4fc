#!/usr/bin/env python

import setuptools

install_requires = [
    'numpy>=1.20.0',
    'tqdm>=4.62.0',
]

extras_require = {
    'test': [
        'pytest>=7.0',
        'scipy>=1.7.0',
    ],
    'docs': [
        'sphinx',
        'sphinx_rtd_theme',
    ],
}

setuptools.setup(
    name='MRmath',
    version='0.3.0',
    description='Numerical building blocks for diffusion MRI model fitting: a bracketed quadratic line search',
    license='GPL-3.0-or-later',
    packages=setuptools.find_packages(exclude=("docs*",)),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires='>=3.8',
    package_data={
        'mrmath': [
            'configs/*.ini',
        ]
    },
    entry_points={
        'console_scripts': ['MRmath=mrmath.master_cli:main'],
    },
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Scientific/Engineering :: Medical Science Apps.',
    ],
)
