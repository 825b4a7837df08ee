# tests/core/build/test_commands.py
"""
Testes do planejamento de comandos de build, push e login.
"""

from atlas_deploy.core.build.commands import (
    build_commands,
    image_name,
    login_command,
    push_commands,
)
from atlas_deploy.core.build.derive import BuildArguments


URI = "123456789012.dkr.ecr.us-west-2.amazonaws.com/app/frontend"


def test_image_name():
    assert image_name(URI, "abc123") == f"{URI}:abc123"


def test_dockerfile_build_command():
    args = BuildArguments(
        uri=URI,
        image_tag="abc123",
        dockerfile="/ws/frontend/Dockerfile",
        context="/ws/frontend",
        args={"NODE_ENV": "production", "GIT_SHA": "abc123"},
        additional_tags=("latest",),
    )

    assert build_commands(args) == [
        [
            "docker", "build",
            "-t", f"{URI}:latest",
            "-t", f"{URI}:abc123",
            "--build-arg", "GIT_SHA=abc123",
            "--build-arg", "NODE_ENV=production",
            "/ws/frontend", "-f", "/ws/frontend/Dockerfile",
        ]
    ]


def test_buildpack_commands():
    args = BuildArguments(
        uri=URI,
        image_tag="abc123",
        dockerfile="",
        context="/ws",
        builder="paketobuildpacks/builder:full",
        env={"BP_NODE_VERSION": "20", "BP_LOG_LEVEL": "DEBUG"},
    )

    pack, tag = build_commands(args)

    assert pack == [
        "pack", "build", f"{URI}:latest",
        "--builder", "paketobuildpacks/builder:full",
        "--path", "/ws",
        "--env", "BP_LOG_LEVEL=DEBUG",
        "--env", "BP_NODE_VERSION=20",
    ]
    assert tag == ["docker", "tag", f"{URI}:latest", f"{URI}:abc123"]


def test_push_commands_order():
    assert push_commands(URI, "abc123", ["latest"]) == [
        ["docker", "push", f"{URI}:latest"],
        ["docker", "push", f"{URI}:abc123"],
    ]


def test_login_command_reads_password_from_stdin():
    assert login_command(URI, "AWS") == ["docker", "login", "-u", "AWS", "--password-stdin", URI]
