import os

import setuptools

# Make sure that README.md decodes in environments that use the C locale
# (which implies ASCII), by explicitly giving the encoding.
with open(os.path.join(os.path.dirname(__file__), "README.md"), encoding="utf-8") as f:
    long_description = f.read()


setuptools.setup(
    name="termui",
    # MAJOR.MINOR.PATCH, per http://semver.org
    version="0.3.0",
    description="Character-cell widgets, menus and dialogs with color markup",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="termui contributors",
    keywords="terminal, tui, widgets, console, color-markup",
    license="ISC",
    py_modules=(
        "rawterm",
        "termui",
        "termui_demo",
    ),
    entry_points={
        "console_scripts": ("termui-demo = termui_demo:main",)
    },
    # Note: no curses. rawterm talks to the terminal directly, which also
    # works on Windows 10+ consoles.
    python_requires=">=3.7",
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: User Interfaces",
        "Topic :: Terminals",
        "License :: OSI Approved :: ISC License (ISCL)",
        "Operating System :: POSIX",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: Implementation :: CPython",
        "Programming Language :: Python :: Implementation :: PyPy",
    ],
)
