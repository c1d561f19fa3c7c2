"""Next.js template: App Router, Tailwind CSS, optional TypeScript."""

from __future__ import annotations

from typing import Any

from ...config import ProjectConfiguration, Stack, TestingFramework
from ..models import Computed, DirectoryStructure, Literal, Template, TemplateFile
from ..templates import rendered
from .common import (
    ci_workflow_file,
    compose_file,
    dockerignore_file,
    env_example_file,
    gitignore_file,
    prettierrc_file,
    readme_file,
    script_pair,
    testing_is,
    to_json,
    uses_javascript,
    uses_typescript,
    wants_docker,
    wants_eslint,
    wants_tests,
)


def _structure() -> DirectoryStructure:
    return {
        "src": {
            "app": {
                "api": {"hello": {}},
            },
            "components": {".gitkeep": None},
            "lib": {".gitkeep": None},
        },
        "public": {".gitkeep": None},
    }


def _package_json(config: ProjectConfiguration) -> str:
    ts = config.features.typescript
    testing = config.features.testing

    scripts: dict[str, str] = {
        "dev": "next dev",
        "build": "next build",
        "start": "next start",
    }
    if config.features.eslint:
        scripts["lint"] = "next lint"
    if config.features.prettier:
        scripts["format"] = 'prettier --write "src/**/*"'

    dev_deps: dict[str, str] = {
        "autoprefixer": "^10.4.16",
        "postcss": "^8.4.32",
        "tailwindcss": "^3.4.0",
    }
    if ts:
        dev_deps.update({
            "@types/node": "^20.11.5",
            "@types/react": "^18.2.45",
            "@types/react-dom": "^18.2.18",
            "typescript": "^5.3.3",
        })
    if config.features.eslint:
        dev_deps["eslint"] = "^8.56.0"
        dev_deps["eslint-config-next"] = "^14.0.4"
        if config.features.prettier:
            dev_deps["eslint-config-prettier"] = "^9.1.0"
    if config.features.prettier:
        dev_deps["prettier"] = "^3.2.4"
    if testing is TestingFramework.JEST:
        scripts["test"] = "jest"
        scripts["test:watch"] = "jest --watch"
        dev_deps.update({
            "jest": "^29.7.0",
            "jest-environment-jsdom": "^29.7.0",
            "@testing-library/react": "^14.1.2",
            "@testing-library/jest-dom": "^6.2.0",
        })
        if ts:
            dev_deps["@types/jest"] = "^29.5.11"
    elif testing is TestingFramework.VITEST:
        scripts["test"] = "vitest run"
        scripts["test:watch"] = "vitest"
        dev_deps.update({
            "vitest": "^1.2.1",
            "@vitejs/plugin-react": "^4.2.1",
            "jsdom": "^24.0.0",
            "@testing-library/react": "^14.1.2",
            "@testing-library/jest-dom": "^6.2.0",
        })

    data: dict[str, Any] = {
        "name": config.name,
        "version": "0.1.0",
        "private": True,
        "description": config.description,
        "author": config.author,
        "scripts": scripts,
        "dependencies": {
            "next": "^14.0.4",
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
        },
        "devDependencies": dict(sorted(dev_deps.items())),
    }
    return to_json(data)


def _tsconfig(config: ProjectConfiguration) -> str:
    return to_json({
        "compilerOptions": {
            "target": "ES2017",
            "lib": ["dom", "dom.iterable", "esnext"],
            "allowJs": True,
            "skipLibCheck": True,
            "strict": True,
            "noEmit": True,
            "esModuleInterop": True,
            "module": "esnext",
            "moduleResolution": "bundler",
            "resolveJsonModule": True,
            "isolatedModules": True,
            "jsx": "preserve",
            "incremental": True,
            "plugins": [{"name": "next"}],
            "paths": {"@/*": ["./src/*"]},
        },
        "include": ["next-env.d.ts", "**/*.ts", "**/*.tsx", ".next/types/**/*.ts"],
        "exclude": ["node_modules"],
    })


_JSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "paths": {"@/*": ["./src/*"]},
    },
}


def _eslintrc(config: ProjectConfiguration) -> str:
    extends = ["next/core-web-vitals"]
    if config.features.prettier:
        extends.append("prettier")
    return to_json({"extends": extends})


_POSTCSS_CONFIG = """module.exports = {
  plugins: {
    tailwindcss: {},
    autoprefixer: {},
  },
}
"""

_NEXT_CONFIG = """/** @type {import('next').NextConfig} */
const nextConfig = {
  output: 'standalone',
}

module.exports = nextConfig
"""


def build_nextjs_template() -> Template:
    files = [
        readme_file(),
        gitignore_file(),
        TemplateFile("package.json", Computed(_package_json)),
        TemplateFile("tsconfig.json", Computed(_tsconfig), condition=uses_typescript),
        TemplateFile("jsconfig.json", Literal(to_json(_JSCONFIG)), condition=uses_javascript),
        TemplateFile("next.config.js", Literal(_NEXT_CONFIG)),
        *script_pair("tailwind.config", rendered("nextjs/tailwind.config.j2")),
        TemplateFile("postcss.config.js", Literal(_POSTCSS_CONFIG)),
        *script_pair("src/app/layout", rendered("nextjs/layout.j2"), component=True),
        *script_pair("src/app/page", rendered("nextjs/page.j2"), component=True),
        TemplateFile("src/app/globals.css", rendered("nextjs/globals.css.j2")),
        *script_pair("src/app/api/hello/route", rendered("nextjs/route.j2")),
        env_example_file(),
        TemplateFile(".eslintrc.json", Computed(_eslintrc), condition=wants_eslint),
        prettierrc_file(),
        *script_pair(
            "src/__tests__/page.test",
            rendered("nextjs/page.test.j2"),
            component=True,
            when=wants_tests,
        ),
        TemplateFile(
            "jest.config.js",
            rendered("nextjs/jest.config.j2"),
            condition=testing_is(TestingFramework.JEST),
        ),
        *script_pair(
            "vitest.config",
            rendered("nextjs/vitest.config.j2"),
            when=testing_is(TestingFramework.VITEST),
        ),
        TemplateFile("Dockerfile", rendered("docker/nextjs.Dockerfile.j2"), condition=wants_docker),
        dockerignore_file(),
        compose_file(),
        ci_workflow_file(),
    ]
    return Template(
        stack=Stack.NEXTJS,
        name="Next.js",
        description="Full-stack React framework with App Router",
        structure=_structure(),
        files=tuple(files),
    )
