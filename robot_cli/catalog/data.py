"""Static template table.

Plain nested dictionaries, ordered as they should be displayed:
category -> stacks -> patterns -> templates.  ``build_categories`` turns the
table into immutable catalog nodes; nothing else should read it directly.
"""

from __future__ import annotations

from typing import Any

from .models import CategoryNode, PatternNode, StackNode, TemplateDescriptor

_GITHUB = "https://github.com/ChenyCHENYU"

TEMPLATE_TABLE: dict[str, dict[str, Any]] = {
    "frontend": {
        "name": "Frontend projects",
        "stacks": {
            "vue": {
                "name": "Vue.js",
                "patterns": {
                    "monolith": {
                        "name": "Monolith",
                        "templates": {
                            "robot-admin": {
                                "name": "Robot Admin (full)",
                                "description": "30+ complete examples, permission management, chart components and best practices",
                                "repo_url": f"{_GITHUB}/Robot_Admin",
                                "features": ["Naive UI", "Vue Router", "Pinia", "Permission management", "Dynamic routes", "Chart components", "Performance tuning"],
                                "version": "full",
                            },
                            "robot-admin-base": {
                                "name": "Robot Admin (base)",
                                "description": "Core architecture and features for a fast start",
                                "repo_url": f"{_GITHUB}/Robot_Admin_Base",
                                "features": ["Naive UI", "Vue Router", "Pinia", "Basic layout"],
                                "version": "base",
                            },
                        },
                    },
                    "monorepo": {
                        "name": "Monorepo",
                        "templates": {
                            "robot-monorepo": {
                                "name": "Robot Monorepo (full)",
                                "description": "bun workspace, multi-package management and a shared component library",
                                "repo_url": f"{_GITHUB}/Robot_Monorepo",
                                "features": ["bun workspace", "shared components", "build tools", "CI/CD"],
                                "version": "full",
                                "start_command": "bun run dev:packages",
                            },
                            "robot-monorepo-base": {
                                "name": "Robot Monorepo (base)",
                                "description": "Basic monorepo structure and core configuration",
                                "repo_url": f"{_GITHUB}/Robot_Monorepo_Base",
                                "features": ["bun workspace", "basic structure"],
                                "version": "base",
                            },
                        },
                    },
                    "microfrontend": {
                        "name": "Micro-frontend",
                        "templates": {
                            "robot-micro": {
                                "name": "Robot Micro-frontend (full)",
                                "description": "MicroApp, Vite module federation and multi-application examples",
                                "repo_url": f"{_GITHUB}/Robot_Micro",
                                "features": ["MicroApp", "Vite module federation", "Multiple apps", "Shared routing"],
                                "version": "full",
                                "start_command": "bun run dev:main",
                            },
                            "robot-micro-base": {
                                "name": "Robot Micro-frontend (base)",
                                "description": "Basic MicroApp architecture with a host and a child application",
                                "repo_url": f"{_GITHUB}/Robot_Micro_Base",
                                "features": ["MicroApp", "Basic configuration"],
                                "version": "base",
                            },
                        },
                    },
                },
            },
            "react": {
                "name": "React.js",
                "patterns": {
                    "monolith": {
                        "name": "Monolith",
                        "templates": {
                            "robot-react": {
                                "name": "Robot React (full)",
                                "description": "Ant Design with a complete feature showcase",
                                "repo_url": f"{_GITHUB}/Robot_React",
                                "features": ["Ant Design", "React Router", "Redux Toolkit"],
                                "version": "full",
                                "start_command": "bun run start",
                            },
                            "robot-react-base": {
                                "name": "Robot React (base)",
                                "description": "Basic React with core features",
                                "repo_url": f"{_GITHUB}/Robot_React_Base",
                                "features": ["React", "React Router", "Basic components"],
                                "version": "base",
                                "start_command": "bun run start",
                            },
                        },
                    },
                },
            },
        },
    },
    "mobile": {
        "name": "Mobile projects",
        "stacks": {
            "uniapp": {
                "name": "uni-app",
                "patterns": {
                    "multiplatform": {
                        "name": "Multi-platform app",
                        "templates": {
                            "robot-uniapp": {
                                "name": "Robot uni-app (full)",
                                "description": "Multi-platform adaptation, plugin market and complete examples",
                                "repo_url": f"{_GITHUB}/Robot_Uniapp",
                                "features": ["Multi-platform publishing", "uView UI", "Plugin integration"],
                                "version": "full",
                                "start_command": "bun run dev:h5",
                            },
                            "robot-uniapp-base": {
                                "name": "Robot uni-app (base)",
                                "description": "Basic framework and core features",
                                "repo_url": f"{_GITHUB}/Robot_Uniapp_Base",
                                "features": ["Basic framework", "Routing configuration"],
                                "version": "base",
                                "start_command": "bun run dev:h5",
                            },
                        },
                    },
                },
            },
            "tarao": {
                "name": "Tarao",
                "patterns": {
                    "native": {
                        "name": "Native app",
                        "templates": {
                            "robot-tarao": {
                                "name": "Robot Tarao (full)",
                                "description": "Native performance, cross-platform, complete features",
                                "repo_url": f"{_GITHUB}/Robot_Tarao",
                                "features": ["Native performance", "Cross-platform", "Complete features"],
                                "version": "full",
                                "status": "coming-soon",
                                "start_command": "bun run android",
                            },
                            "robot-tarao-base": {
                                "name": "Robot Tarao (base)",
                                "description": "Basic Tarao framework",
                                "repo_url": f"{_GITHUB}/Robot_Tarao_Base",
                                "features": ["Basic framework", "Core features"],
                                "version": "base",
                                "status": "coming-soon",
                                "start_command": "bun run android",
                            },
                        },
                    },
                },
            },
        },
    },
    "backend": {
        "name": "Backend projects",
        "stacks": {
            "nestjs": {
                "name": "NestJS",
                "patterns": {
                    "api": {
                        "name": "API service",
                        "templates": {
                            "robot-nest": {
                                "name": "Robot NestJS (full)",
                                "description": "NestJS, TypeORM, JWT, Swagger, Redis and the complete ecosystem",
                                "repo_url": f"{_GITHUB}/Robot_Nest",
                                "features": ["NestJS", "TypeORM", "JWT auth", "ApiFox docs", "Redis", "Microservices"],
                                "version": "full",
                                "start_command": "bun run start:dev",
                            },
                            "robot-nest-base": {
                                "name": "Robot NestJS (base)",
                                "description": "Basic NestJS with core modules",
                                "repo_url": f"{_GITHUB}/Robot_Nest_Base",
                                "features": ["NestJS", "Basic routing", "Error handling"],
                                "version": "base",
                                "start_command": "bun run start:dev",
                            },
                        },
                    },
                    "microservice": {
                        "name": "Microservices",
                        "templates": {
                            "robot-nest-micro": {
                                "name": "Robot NestJS (microservices)",
                                "description": "NestJS microservice architecture with gRPC and service discovery",
                                "repo_url": f"{_GITHUB}/Robot_Nest_Micro",
                                "features": ["NestJS", "Microservices", "gRPC", "Redis", "Service discovery"],
                                "version": "micro",
                                "start_command": "bun run start:dev",
                            },
                        },
                    },
                },
            },
            "koa": {
                "name": "Koa3",
                "patterns": {
                    "api": {
                        "name": "API service",
                        "templates": {
                            "robot-koa": {
                                "name": "Robot Koa3 (full)",
                                "description": "Koa3, TypeScript, JWT, database access and middleware",
                                "repo_url": f"{_GITHUB}/Robot_Koa",
                                "features": ["Koa3", "TypeScript", "JWT auth", "MySQL", "Middleware"],
                                "version": "full",
                            },
                            "robot-koa-base": {
                                "name": "Robot Koa3 (base)",
                                "description": "Basic Koa3 with core middleware",
                                "repo_url": f"{_GITHUB}/Robot_Koa_Base",
                                "features": ["Koa3", "Basic routing", "Error handling"],
                                "version": "base",
                            },
                        },
                    },
                },
            },
        },
    },
    "desktop": {
        "name": "Desktop projects",
        "stacks": {
            "electron": {
                "name": "Electron",
                "patterns": {
                    "desktop": {
                        "name": "Desktop app",
                        "templates": {
                            "robot-electron": {
                                "name": "Robot Electron (full)",
                                "description": "Vue3 and Electron with auto-update and native capabilities",
                                "repo_url": f"{_GITHUB}/Robot_Electron",
                                "features": ["Vue3", "Electron", "Auto update", "Native API"],
                                "version": "full",
                                "start_command": "bun run electron:dev",
                            },
                            "robot-electron-base": {
                                "name": "Robot Electron (base)",
                                "description": "Basic Electron with the Vue framework",
                                "repo_url": f"{_GITHUB}/Robot_Electron_Base",
                                "features": ["Vue3", "Electron", "Basic features"],
                                "version": "base",
                                "start_command": "bun run electron:dev",
                            },
                        },
                    },
                },
            },
            "tauri": {
                "name": "Tauri",
                "patterns": {
                    "desktop": {
                        "name": "Desktop app",
                        "templates": {
                            "robot-tauri": {
                                "name": "Robot Tauri (full)",
                                "description": "Rust backend, Vue frontend and native performance",
                                "repo_url": f"{_GITHUB}/Robot_Tauri",
                                "features": ["Tauri", "Vue3", "Rust backend", "Native performance"],
                                "version": "full",
                                "start_command": "bun run tauri dev",
                            },
                            "robot-tauri-base": {
                                "name": "Robot Tauri (base)",
                                "description": "Basic Tauri with the Vue framework",
                                "repo_url": f"{_GITHUB}/Robot_Tauri_Base",
                                "features": ["Tauri", "Vue3", "Basic features"],
                                "version": "base",
                                "start_command": "bun run tauri dev",
                            },
                        },
                    },
                },
            },
        },
    },
}

RECOMMENDED_KEYS: tuple[str, ...] = (
    "robot-admin",     # Vue admin dashboard, the most used
    "robot-uniapp",    # cross-platform mobile
    "robot-nest",      # enterprise API
    "robot-electron",  # desktop
    "robot-react",
    "robot-koa",       # lightweight backend
)


def _descriptor(key: str, raw: dict[str, Any]) -> TemplateDescriptor:
    data: dict[str, Any] = {
        "key": key,
        "display_name": raw["name"],
        "description": raw.get("description", ""),
        "source_location": raw["repo_url"],
        "features": tuple(raw.get("features", ())),
        "variant_tag": raw.get("version", "full"),
    }
    if "status" in raw:
        data["status"] = raw["status"]
    if "start_command" in raw:
        data["start_command"] = raw["start_command"]
    return TemplateDescriptor(**data)


def build_categories(table: dict[str, dict[str, Any]] | None = None) -> tuple[CategoryNode, ...]:
    """Convert a nested template table into immutable catalog nodes."""
    table = TEMPLATE_TABLE if table is None else table
    return tuple(
        CategoryNode(
            key=category_key,
            name=category["name"],
            stacks=tuple(
                StackNode(
                    key=stack_key,
                    name=stack["name"],
                    patterns=tuple(
                        PatternNode(
                            key=pattern_key,
                            name=pattern["name"],
                            templates=tuple(
                                _descriptor(key, raw)
                                for key, raw in pattern.get("templates", {}).items()
                            ),
                        )
                        for pattern_key, pattern in stack.get("patterns", {}).items()
                    ),
                )
                for stack_key, stack in category.get("stacks", {}).items()
            ),
        )
        for category_key, category in table.items()
    )
