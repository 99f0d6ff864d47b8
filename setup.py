from setuptools import setup, find_packages

# Check if PyGObject (gi) is already available system-wide
# This prevents pip from trying to build PyGObject from source when it's
# already installed via system package manager (apt, pacman, etc.)
_HAS_PYGOBJECT = False
try:
    import gi
    gi.require_version('GLib', '2.0')
    from gi.repository import GLib
    _HAS_PYGOBJECT = True
except (ImportError, ValueError, AttributeError):
    _HAS_PYGOBJECT = False

# Base requirements - always needed
install_requires = [
    "dbus-python>=1.2.0",
    "PyYAML>=6.0",
]

extras_require = {
    "test": ["pytest>=8.0.0"],
}

# PyGObject drives the GLib main loop the exported player needs.
# If not system-installed, add it to install_requires
if not _HAS_PYGOBJECT:
    install_requires.append("PyGObject>=3.48.0")
    extras_require["mainloop"] = []
else:
    extras_require["mainloop"] = ["PyGObject>=3.48.0"]

setup(
    name="mprisbridge",
    version="1.0.0",
    description="MPRIS D-Bus interface for Python media players",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        'console_scripts': [
            'mprisbridge=mprisbridge.cli:main',
        ],
    },
    python_requires='>=3.8',
)
