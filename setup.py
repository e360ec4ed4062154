import setuptools

setuptools.setup(
    version="0.0.1",
    license='mit',
    name='lambda-harness',
    packages=['harness', 'handlers', 'inputs'],
    py_modules=['cli_harness'],
    python_requires='>=3.10',
    install_requires=['requests >2, <3',
                      'boto3 >1, <2',
                      'argh >=0.30'],
    extras_require={'test': ['pytest',
                             'moto[awslambda,iam,s3] >=5']},
    entry_points={'console_scripts': ['lambda-harness = cli_harness:main']},
    description='package, deploy and invoke lambda handlers against emulated aws',
)
