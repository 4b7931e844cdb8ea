"""Static context documents served by ``ContextManagerClient`` in test mode."""

from __future__ import annotations

from typing import Final

from .models import Context

MOCK_CONTEXTS: Final[tuple[Context, ...]] = (
    Context(
        id="1",
        name="Getting Started with React",
        content="""# Getting Started with React

React is a JavaScript library for building user interfaces. It allows
developers to create reusable UI components and manage application state.

## Key Concepts

- **Components**: building blocks of React applications
- **JSX**: syntax extension for writing HTML-like markup
- **State**: data that changes over time in a component
- **Props**: data passed from parent to child components

## Getting Started

1. Create a new app: `npx create-react-app my-app`
2. Enter the directory: `cd my-app`
3. Start the development server: `npm start`""",
        category="tutorial",
        tags=("react", "javascript", "frontend", "ui"),
        updated_at="2024-01-15T10:30:00.000Z",
    ),
    Context(
        id="2",
        name="Node.js Best Practices",
        content="""# Node.js Best Practices

Node.js runs JavaScript on the server side. These practices help keep
services scalable and maintainable.

## Asynchronous Programming
- Prefer `async/await` over callbacks
- Avoid blocking the event loop

## Configuration
- Use environment variables for configuration
- Never commit secrets to version control

## Monitoring and Logging
- Emit structured logs
- Expose health check endpoints""",
        category="guide",
        tags=("nodejs", "javascript", "backend", "server"),
        updated_at="2024-01-20T14:15:00.000Z",
    ),
    Context(
        id="3",
        name="Database Design Principles",
        content="""# Database Design Principles

A well-designed schema is the foundation of a reliable application.

## Normalization
- **1NF**: atomic values, no repeating groups
- **2NF**: no partial dependencies on a composite key
- **3NF**: no transitive dependencies

## Indexing
- Index columns used in WHERE, JOIN and ORDER BY clauses
- Composite indexes follow the order of the query predicates
- Too many indexes slow down writes""",
        category="reference",
        tags=("database", "sql", "design", "performance"),
        updated_at="2024-01-18T09:45:00.000Z",
    ),
    Context(
        id="4",
        name="TypeScript Migration Guide",
        content="""# TypeScript Migration Guide

Migrating a JavaScript codebase to TypeScript improves safety and tooling.

## Steps
1. Add a `tsconfig.json` with `allowJs` enabled
2. Rename files from `.js` to `.ts` one module at a time
3. Start with utility functions and models
4. Turn on `strict` once the codebase compiles cleanly

## Tips
- Prefer interfaces for object shapes
- Avoid `any`; reach for `unknown` and narrow it""",
        category="tutorial",
        tags=("typescript", "javascript", "migration", "types"),
        updated_at="2024-01-22T16:20:00.000Z",
    ),
    Context(
        id="5",
        name="API Documentation Standards",
        content="""# API Documentation Standards

Consistent documentation makes an API easy to adopt.

## Every endpoint documents
- Method and path
- Request parameters and body schema
- Response codes and example payloads
- Authentication requirements

## OpenAPI
Describe the API in an OpenAPI document and generate reference pages from
it so that documentation never drifts from the implementation.""",
        category="standard",
        tags=("api", "documentation", "rest", "openapi"),
        updated_at="2024-01-17T11:00:00.000Z",
    ),
    Context(
        id="6",
        name="Docker Container Best Practices",
        content="""# Docker Container Best Practices

Docker containers provide consistent deployment environments. Learn how to
optimize Docker images and manage container lifecycles effectively.

## Dockerfile Optimization
- Use multi-stage builds to keep images small
- Order instructions from least to most frequently changing
- Use .dockerignore to exclude files from the build context

## Runtime
- Run processes as a non-root user
- Define health checks
- Keep one concern per container""",
        category="guide",
        tags=("docker", "containers", "deployment", "devops"),
        updated_at="2024-01-25T13:30:00.000Z",
    ),
    Context(
        id="7",
        name="CSS Grid Layout Fundamentals",
        content="""# CSS Grid Layout Fundamentals

CSS Grid is a two-dimensional layout system for the web.

## Basics
- `display: grid` turns an element into a grid container
- `grid-template-columns` and `grid-template-rows` define tracks
- `gap` sets spacing between tracks

## Responsive Layouts
Combine `repeat(auto-fit, minmax(200px, 1fr))` with media queries to build
layouts that adapt to any screen size.""",
        category="tutorial",
        tags=("css", "grid", "layout", "frontend", "responsive"),
        updated_at="2024-01-12T08:15:00.000Z",
    ),
    Context(
        id="8",
        name="Security Checklist for Web Applications",
        content="""# Security Checklist for Web Applications

## Input Handling
- Validate and sanitize all user input
- Use parameterized queries to prevent SQL injection
- Encode output to prevent cross-site scripting

## Sessions
- Set `HttpOnly`, `Secure` and `SameSite` on cookies
- Rotate session identifiers after login

## Transport
- Serve everything over HTTPS
- Enable HSTS""",
        category="reference",
        tags=("security", "web", "vulnerabilities", "checklist"),
        updated_at="2024-01-21T12:45:00.000Z",
    ),
    Context(
        id="9",
        name="Git Workflow Guidelines",
        content="""# Git Workflow Guidelines

## Branching
- `main` is always releasable
- Feature branches are named `feature/<topic>`
- Rebase on `main` before opening a pull request

## Commit Messages
Follow the conventional commit format:

    feat(auth): add password reset functionality
    fix(api): handle empty search results
    refactor(utils): simplify date formatting functions""",
        category="standard",
        tags=("git", "workflow", "collaboration", "version-control"),
        updated_at="2024-01-19T15:10:00.000Z",
    ),
    Context(
        id="10",
        name="Performance Optimization Techniques",
        content="""# Performance Optimization Techniques

## Frontend
- Split bundles and lazy-load routes
- Compress and resize images
- Cache static assets with long-lived headers

## Backend
- Cache expensive queries
- Paginate large result sets
- Profile before optimizing

## Offline
Service workers enable offline functionality and faster repeat visits.""",
        category="guide",
        tags=("performance", "optimization", "frontend", "backend"),
        updated_at="2024-01-23T10:25:00.000Z",
    ),
)
