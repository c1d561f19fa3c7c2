"""MERN and PERN templates: a Vite + React client and an Express server.

Both stacks share the same layout -- ``client/`` and ``server/`` -- and differ
only in the datastore the server connects to.  The Express-only stack is not
defined here; the registry derives it from the MERN ``server/`` subtree.
"""

from __future__ import annotations

from typing import Any

from ...config import Datastore, ProjectConfiguration, Stack, TestingFramework
from ..models import Computed, DirectoryStructure, Literal, Template, TemplateFile
from ..templates import rendered
from .common import (
    all_of,
    ci_workflow_file,
    compose_file,
    dockerignore_file,
    env_example_file,
    eslint_config,
    eslint_dev_dependencies,
    gitignore_file,
    lint_scripts,
    prettierrc_file,
    readme_file,
    script_pair,
    testing_is,
    to_json,
    uses_typescript,
    wants_docker,
    wants_eslint,
    wants_tests,
)

SERVER_PREFIX = "server/"
CLIENT_PREFIX = "client/"


def _structure() -> DirectoryStructure:
    return {
        "client": {
            "public": {".gitkeep": None},
            "src": {
                "components": {".gitkeep": None},
                "pages": {".gitkeep": None},
                "hooks": {".gitkeep": None},
                "utils": {".gitkeep": None},
            },
        },
        "server": {
            "src": {
                "config": {},
                "controllers": {},
                "middleware": {},
                "models": {".gitkeep": None},
                "routes": {},
                "utils": {".gitkeep": None},
            },
        },
    }


# ---------------------------------------------------------------------------
# Client manifests
# ---------------------------------------------------------------------------


def _client_package_json(config: ProjectConfiguration) -> str:
    ts = config.features.typescript
    testing = config.features.testing

    scripts: dict[str, str] = {
        "dev": "vite",
        "build": "tsc && vite build" if ts else "vite build",
        "preview": "vite preview",
    }
    scripts.update(lint_scripts(config))

    dev_deps: dict[str, str] = {
        "@vitejs/plugin-react": "^4.2.1",
        "vite": "^5.0.8",
    }
    if ts:
        dev_deps.update({
            "@types/react": "^18.2.43",
            "@types/react-dom": "^18.2.17",
            "typescript": "^5.2.2",
        })
    if testing is TestingFramework.VITEST:
        scripts["test"] = "vitest run"
        scripts["test:watch"] = "vitest"
        dev_deps.update({
            "vitest": "^1.2.1",
            "jsdom": "^24.0.0",
            "@testing-library/react": "^14.1.2",
            "@testing-library/jest-dom": "^6.2.0",
        })
    elif testing is TestingFramework.JEST:
        scripts["test"] = "jest"
        scripts["test:watch"] = "jest --watch"
        dev_deps.update({
            "jest": "^29.7.0",
            "jest-environment-jsdom": "^29.7.0",
            "babel-jest": "^29.7.0",
            "@babel/preset-env": "^7.23.8",
            "@babel/preset-react": "^7.23.3",
            "@testing-library/react": "^14.1.2",
            "@testing-library/jest-dom": "^6.2.0",
            "identity-obj-proxy": "^3.0.0",
        })
        if ts:
            dev_deps["@babel/preset-typescript"] = "^7.23.3"
            dev_deps["@types/jest"] = "^29.5.11"
    dev_deps.update(eslint_dev_dependencies(config, react=True))

    data: dict[str, Any] = {
        "name": f"{config.directory_name}-client",
        "private": True,
        "version": "0.0.0",
        "type": "module",
        "scripts": scripts,
        "dependencies": {
            "axios": "^1.6.5",
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
            "react-router-dom": "^6.21.1",
        },
        "devDependencies": dict(sorted(dev_deps.items())),
    }
    return to_json(data)


def _client_tsconfig(config: ProjectConfiguration) -> str:
    return to_json({
        "compilerOptions": {
            "target": "ES2020",
            "useDefineForClassFields": True,
            "lib": ["ES2020", "DOM", "DOM.Iterable"],
            "module": "ESNext",
            "skipLibCheck": True,
            "moduleResolution": "bundler",
            "allowImportingTsExtensions": True,
            "resolveJsonModule": True,
            "isolatedModules": True,
            "noEmit": True,
            "jsx": "react-jsx",
            "strict": True,
            "noUnusedLocals": True,
            "noUnusedParameters": True,
            "noFallthroughCasesInSwitch": True,
        },
        "include": ["src"],
    })


# ---------------------------------------------------------------------------
# Server manifests
# ---------------------------------------------------------------------------


def _server_package_json(config: ProjectConfiguration) -> str:
    ts = config.features.typescript
    testing = config.features.testing
    mongo = config.datastore is Datastore.MONGODB

    if ts:
        scripts = {
            "dev": "tsx watch src/index.ts",
            "build": "tsc",
            "start": "node dist/index.js",
        }
    else:
        scripts = {
            "dev": "node --watch src/index.js",
            "start": "node src/index.js",
        }
    scripts.update(lint_scripts(config))

    deps: dict[str, str] = {
        "cors": "^2.8.5",
        "dotenv": "^16.3.1",
        "express": "^4.18.2",
    }
    if mongo:
        deps["mongoose"] = "^8.0.4"
    else:
        deps["pg"] = "^8.11.3"

    dev_deps: dict[str, str] = {}
    if ts:
        dev_deps.update({
            "@types/cors": "^2.8.17",
            "@types/express": "^4.17.21",
            "@types/node": "^20.11.5",
            "tsx": "^4.7.0",
            "typescript": "^5.3.3",
        })
        if not mongo:
            dev_deps["@types/pg"] = "^8.10.9"
    if testing is TestingFramework.JEST:
        scripts["test"] = "node --experimental-vm-modules node_modules/jest/bin/jest.js"
        dev_deps.update({"jest": "^29.7.0", "supertest": "^6.3.4"})
        if ts:
            dev_deps.update({
                "ts-jest": "^29.1.1",
                "@types/jest": "^29.5.11",
                "@types/supertest": "^6.0.2",
            })
    elif testing is TestingFramework.VITEST:
        scripts["test"] = "vitest run"
        dev_deps.update({"vitest": "^1.2.1", "supertest": "^6.3.4"})
        if ts:
            dev_deps["@types/supertest"] = "^6.0.2"
    dev_deps.update(eslint_dev_dependencies(config, react=False))

    name = config.name if config.stack is Stack.EXPRESS else f"{config.directory_name}-server"
    data: dict[str, Any] = {
        "name": name,
        "version": "1.0.0",
        "description": config.description,
        "type": "module",
        "main": "dist/index.js" if ts else "src/index.js",
        "scripts": scripts,
        "author": config.author,
        "license": "MIT",
        "dependencies": deps,
        "devDependencies": dict(sorted(dev_deps.items())),
    }
    return to_json(data)


def _server_tsconfig(config: ProjectConfiguration) -> str:
    return to_json({
        "compilerOptions": {
            "target": "ES2020",
            "module": "ESNext",
            "moduleResolution": "node",
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "forceConsistentCasingInFileNames": True,
            "resolveJsonModule": True,
        },
        "include": ["src/**/*"],
        "exclude": ["node_modules", "dist", "tests"],
    })


_SERVER_TEST_TSCONFIG: dict[str, Any] = {
    "extends": "./tsconfig.json",
    "compilerOptions": {"rootDir": ".", "noEmit": True},
    "include": ["src", "tests"],
}


def _database_template(config: ProjectConfiguration) -> str:
    if config.datastore is Datastore.MONGODB:
        return rendered("fullstack/server/database_mongodb.j2").render(config)
    return rendered("fullstack/server/database_postgres.j2").render(config)


# ---------------------------------------------------------------------------
# Template definition
# ---------------------------------------------------------------------------


def _client_files() -> list[TemplateFile]:
    jest = testing_is(TestingFramework.JEST)
    return [
        TemplateFile("client/package.json", Computed(_client_package_json)),
        *script_pair("client/vite.config", rendered("fullstack/client/vite.config.j2")),
        TemplateFile("client/tsconfig.json", Computed(_client_tsconfig), condition=uses_typescript),
        TemplateFile("client/index.html", rendered("fullstack/client/index.html.j2")),
        *script_pair("client/src/main", rendered("fullstack/client/main.j2"), component=True),
        *script_pair("client/src/App", rendered("fullstack/client/App.j2"), component=True),
        TemplateFile("client/src/index.css", rendered("fullstack/client/index.css.j2")),
        TemplateFile("client/.env.example", Literal("VITE_API_URL=http://localhost:5000/api\n")),
        TemplateFile(
            "client/.eslintrc.json",
            Computed(lambda c: to_json(eslint_config(c, react=True))),
            condition=wants_eslint,
        ),
        *script_pair(
            "client/src/App.test",
            rendered("fullstack/client/App.test.j2"),
            component=True,
            when=wants_tests,
        ),
        *script_pair("client/src/setupTests", rendered("fullstack/client/setupTests.j2"), when=wants_tests),
        TemplateFile("client/jest.config.cjs", rendered("fullstack/client/jest.config.j2"), condition=jest),
        TemplateFile("client/babel.config.cjs", rendered("fullstack/client/babel.config.j2"), condition=jest),
        TemplateFile("client/Dockerfile", rendered("docker/vite.Dockerfile.j2"), condition=wants_docker),
        TemplateFile("client/nginx.conf", rendered("docker/nginx.conf.j2"), condition=wants_docker),
        dockerignore_file(CLIENT_PREFIX),
    ]


def _server_files() -> list[TemplateFile]:
    return [
        TemplateFile("server/package.json", Computed(_server_package_json)),
        TemplateFile("server/tsconfig.json", Computed(_server_tsconfig), condition=uses_typescript),
        *script_pair("server/src/index", rendered("fullstack/server/index.j2")),
        *script_pair("server/src/app", rendered("fullstack/server/app.j2")),
        *script_pair("server/src/config/database", Computed(_database_template)),
        *script_pair("server/src/routes/index", rendered("fullstack/server/routes.j2")),
        *script_pair("server/src/controllers/health.controller", rendered("fullstack/server/health.j2")),
        *script_pair("server/src/middleware/errorHandler", rendered("fullstack/server/errorHandler.j2")),
        TemplateFile("server/.env.example", rendered("fullstack/server/env.j2")),
        TemplateFile(
            "server/.eslintrc.json",
            Computed(lambda c: to_json(eslint_config(c, react=False))),
            condition=wants_eslint,
        ),
        *script_pair("server/tests/health.test", rendered("fullstack/server/health.test.j2"), when=wants_tests),
        TemplateFile(
            "server/jest.config.cjs",
            rendered("fullstack/server/jest.config.j2"),
            condition=testing_is(TestingFramework.JEST),
        ),
        TemplateFile(
            "server/tsconfig.test.json",
            Literal(to_json(_SERVER_TEST_TSCONFIG)),
            condition=all_of(uses_typescript, wants_tests),
        ),
        TemplateFile("server/Dockerfile", rendered("docker/node.Dockerfile.j2"), condition=wants_docker),
        dockerignore_file(SERVER_PREFIX),
    ]


def _build(stack: Stack, name: str, description: str) -> Template:
    files = [
        readme_file(),
        gitignore_file(),
        env_example_file(),
        prettierrc_file(),
        compose_file(),
        ci_workflow_file(),
        *_client_files(),
        *_server_files(),
    ]
    return Template(
        stack=stack,
        name=name,
        description=description,
        structure=_structure(),
        files=tuple(files),
    )


def build_mern_template() -> Template:
    return _build(Stack.MERN, "MERN", "MongoDB + Express + React + Node.js")


def build_pern_template() -> Template:
    return _build(Stack.PERN, "PERN", "PostgreSQL + Express + React + Node.js")
