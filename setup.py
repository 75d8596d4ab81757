# SPDX-FileCopyrightText: 2025 Nuttgram contributors
# SPDX-License-Identifier: MIT

from setuptools import find_packages, setup

setup(
    name="nuttgram-security",
    version="0.1.0",
    description="Secure display toggle exposed to the UI layer over a method channel",
    author="Nuttgram team",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "click<9.0,>=8.1",
        "cryptography>=38.0.4",
    ],
    extras_require={
        "gui": [
            "kivy>=2.2",
            "kivymd>=1.1,<2.0",
        ],
        "android": [
            "pyjnius>=1.5",
        ],
        "test": [
            "pytest>=8.0.0",
            "pytest-cov>=5.0.0",
            "pytest-timeout>=2.3.0",
            "hypothesis>=6.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "nuttgram-security=nuttgram_security.cli:main",
        ],
        "gui_scripts": [
            "nuttgram-security-gui=nuttgram_security.host:main",
        ],
    },
)
