from setuptools import find_packages, setup

package_name = "sim2_geometry"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test"]),
    data_files=[
        ("share/" + package_name + "/config", ["config/sim2_geometry_base.yaml"]),
    ],
    python_requires=">=3.9",
    install_requires=["setuptools", "numpy", "pydantic>=2", "PyYAML"],
    extras_require={
        "test": ["pytest", "scipy"],
    },
    zip_safe=True,
    maintainer="you",
    maintainer_email="you@example.com",
    description="2D similarity transform Lie group with analytic Jacobians and closed-form alignment",
    license="Apache-2.0",
    tests_require=["pytest", "scipy"],
)
