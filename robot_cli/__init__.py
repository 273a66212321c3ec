"""Robot CLI -- scaffold new projects from curated starter templates.

The package is split into four layers:

* ``robot_cli.catalog``      -- the static, hierarchical template registry
* ``robot_cli.navigation``   -- the interactive template-selection wizard
* ``robot_cli.acquisition``  -- download, extract and validate a template
* ``robot_cli.materializer`` -- copy the template into a new project

``robot_cli.create`` wires them together and ``robot_cli.cli`` exposes the
``robot`` command line.
"""

__version__ = "1.0.0"
