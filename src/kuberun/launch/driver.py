"""Head pod driver backed by the ``kubectl`` CLI.

Creates a single pod named after the run, which starts the pipeline engine
inside the cluster, then follows it until it terminates.

Key Concepts:
    KubectlDriver: ``run()`` applies the pod manifest and, unless in
        background mode, streams the pod logs and waits for termination.
        ``shutdown()`` returns the head container's exit code.
    build_pod_manifest(): Pure function of the pipeline, script args and
        ``LaunchConfig``; unit-testable without a cluster.

Architecture Decisions:
    - subprocess, not the kubernetes client: works with whatever context and
      credentials the user's ``kubectl`` is configured with.
    - Manifests are sent as JSON on stdin (``kubectl apply -f -``), which
      kubectl accepts alongside YAML.
    - Phase polling uses exponential backoff capped at 5s.
"""

from __future__ import annotations

import json
import shlex
import shutil
import subprocess
import sys
import time
from typing import Any

from kuberun.core.errors import DriverError, KubectlNotFoundError
from kuberun.core.logging import get_logger
from kuberun.launch.models import LaunchConfig

logger = get_logger(__name__)

PIPELINE_SCRIPT_ENV = "KUBERUN_PIPELINE_SCRIPT"
STDIN_SCRIPT_PATH = "/tmp/kuberun-main.nf"
TERMINAL_PHASES = ("Succeeded", "Failed")


class KubectlDriver:
    """Launch and supervise the head pod via ``kubectl``.

    Parameters
    ----------
    kubectl
        kubectl binary name or path.
    default_image
        Image used when the launch config carries none.
    launch_command
        Pipeline engine executable started in the pod.
    default_namespace
        Namespace used when the launch config carries none.
    startup_timeout
        Seconds to wait for the pod to leave ``Pending``.
    """

    def __init__(
        self,
        kubectl: str = "kubectl",
        *,
        default_image: str = "nextflow/nextflow:latest",
        launch_command: str = "nextflow",
        default_namespace: str | None = None,
        startup_timeout: int = 600,
    ) -> None:
        self.default_image = default_image
        self.launch_command = launch_command
        self.default_namespace = default_namespace
        self.startup_timeout = startup_timeout
        self.kubectl = kubectl
        self._kubectl_path: str | None = None
        self._namespace: str | None = None
        self._pod_name: str | None = None
        self._background = False
        self._status: int | None = None

    @staticmethod
    def _find_kubectl(kubectl: str) -> str:
        found = shutil.which(kubectl)
        if found is None:
            raise KubectlNotFoundError(
                f"kubectl CLI not found: {kubectl!r}. Install kubectl or set KUBERUN_KUBECTL.\n"
                "  - https://kubernetes.io/docs/tasks/tools/"
            )
        return found

    @property
    def _kubectl_cmd(self) -> str:
        if self._kubectl_path is None:
            self._kubectl_path = self._find_kubectl(self.kubectl)
        return self._kubectl_path

    # ------------------------------------------------------------------
    # Manifest
    # ------------------------------------------------------------------

    def build_pod_manifest(
        self,
        pipeline: str,
        script_args: list[str],
        config: LaunchConfig,
        pipeline_script: str | None = None,
    ) -> dict[str, Any]:
        """Build the head pod manifest for ``config``."""
        container: dict[str, Any] = {
            "name": config.run_name,
            "image": config.head_image or self.default_image,
            "command": ["/bin/bash", "-c", self.build_command(pipeline, script_args, config)],
        }

        resources: dict[str, str] = {}
        if config.head_cpus:
            resources["cpu"] = str(config.head_cpus)
        if config.head_memory:
            resources["memory"] = config.head_memory
        if resources:
            container["resources"] = {"requests": resources, "limits": dict(resources)}

        if pipeline_script is not None:
            container["env"] = [{"name": PIPELINE_SCRIPT_ENV, "value": pipeline_script}]

        volumes, mounts = self._volumes(config.volume_mounts)
        if mounts:
            container["volumeMounts"] = mounts

        metadata: dict[str, Any] = {
            "name": config.run_name,
            "labels": {"app": "kuberun", "runName": config.run_name},
        }
        namespace = config.namespace or self.default_namespace
        if namespace:
            metadata["namespace"] = namespace

        spec: dict[str, Any] = {"restartPolicy": "Never", "containers": [container]}
        if volumes:
            spec["volumes"] = volumes

        return {"apiVersion": "v1", "kind": "Pod", "metadata": metadata, "spec": spec}

    def build_command(self, pipeline: str, script_args: list[str], config: LaunchConfig) -> str:
        """Shell command run by the head container."""
        target = STDIN_SCRIPT_PATH if pipeline == "-" else pipeline
        argv = [self.launch_command, "run", target, "-name", config.run_name]
        for path in config.remote_config:
            argv.extend(["-c", path])
        if config.remote_profile:
            argv.extend(["-profile", config.remote_profile])
        argv.extend(script_args)

        steps = []
        if pipeline == "-":
            steps.append(f'printf "%s" "${PIPELINE_SCRIPT_ENV}" > {STDIN_SCRIPT_PATH}')
        if config.head_prescript:
            steps.append(f"source {shlex.quote(config.head_prescript)}")
        steps.append(shlex.join(argv))
        return " && ".join(steps)

    @staticmethod
    def _volumes(mounts: tuple[str, ...]) -> tuple[list[dict[str, Any]], list[dict[str, str]]]:
        volumes: list[dict[str, Any]] = []
        volume_mounts: list[dict[str, str]] = []
        for i, mount in enumerate(mounts):
            claim, sep, path = mount.partition(":")
            if not sep or not claim or not path:
                raise DriverError(f"Invalid volume mount: {mount!r} -- expected 'claim:path'")
            name = f"vol-{i + 1}"
            volumes.append({"name": name, "persistentVolumeClaim": {"claimName": claim}})
            volume_mounts.append({"name": name, "mountPath": path})
        return volumes, volume_mounts

    # ------------------------------------------------------------------
    # Driver protocol
    # ------------------------------------------------------------------

    def run(self, pipeline: str, script_args: list[str], config: LaunchConfig) -> None:
        """Create the head pod and, unless in background mode, follow it to completion."""
        pipeline_script = sys.stdin.read() if pipeline == "-" else None
        manifest = self.build_pod_manifest(pipeline, script_args, config, pipeline_script)

        self._pod_name = config.run_name
        self._namespace = manifest["metadata"].get("namespace")
        self._background = config.background
        self._status = None

        self._kubectl(["apply", "-f", "-"], input=json.dumps(manifest))
        logger.info("pod.created", pod=self._pod_name, namespace=self._namespace)

        if config.background:
            return

        self._wait_until_started()
        self._follow_logs()
        self._status = self._wait_for_exit_code()

    def shutdown(self) -> int:
        """Return the head container exit code (0 when detached)."""
        if self._background:
            return 0
        if self._status is None:
            raise DriverError("Driver shut down before the run completed")
        return self._status

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _kubectl(
        self,
        args: list[str],
        *,
        input: str | None = None,
        check: bool = True,
        timeout: int = 60,
    ) -> subprocess.CompletedProcess[str]:
        """Run a kubectl command, scoped to the run's namespace."""
        cmd = [self._kubectl_cmd, *args]
        if self._namespace:
            cmd.extend(["--namespace", self._namespace])
        logger.debug("kubectl.exec", cmd=" ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                input=input,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise DriverError(f"kubectl timed out after {timeout}s: {' '.join(args)}") from exc
        if check and result.returncode != 0:
            raise DriverError(
                f"kubectl failed (exit {result.returncode}): {' '.join(args)}\n{result.stderr}"
            )
        return result

    def _phase(self) -> str:
        result = self._kubectl(
            ["get", "pod", self._pod_name, "-o", "jsonpath={.status.phase}"],
            check=False,
        )
        return result.stdout.strip() if result.returncode == 0 else ""

    def _wait_until_started(self) -> None:
        """Poll until the pod leaves Pending.

        Backoff: 1s, 2s, 4s, 5s (capped), ...
        """
        deadline = time.time() + self.startup_timeout
        delay = 1.0
        while time.time() < deadline:
            phase = self._phase()
            if phase and phase != "Pending":
                return
            time.sleep(delay)
            delay = min(delay * 2, 5.0)
        raise DriverError(
            f"Pod {self._pod_name} did not start within {self.startup_timeout}s"
        ).with_context(run_name=self._pod_name, namespace=self._namespace)

    def _follow_logs(self) -> None:
        """Stream the pod logs to our stdout until the container exits."""
        cmd = [self._kubectl_cmd, "logs", "--follow", self._pod_name]
        if self._namespace:
            cmd.extend(["--namespace", self._namespace])
        subprocess.run(cmd, check=False)  # noqa: S603

    def _wait_for_exit_code(self) -> int:
        delay = 1.0
        while True:
            phase = self._phase()
            if phase in TERMINAL_PHASES:
                break
            if not phase:
                raise DriverError(f"Pod {self._pod_name} disappeared before completing")
            time.sleep(delay)
            delay = min(delay * 2, 5.0)
        result = self._kubectl([
            "get", "pod", self._pod_name, "-o",
            "jsonpath={.status.containerStatuses[0].state.terminated.exitCode}",
        ])
        code = result.stdout.strip()
        if not code.lstrip("-").isdigit():
            raise DriverError(f"Unable to read exit code of pod {self._pod_name}: {code!r}")
        logger.info("pod.terminated", pod=self._pod_name, exit_code=int(code))
        return int(code)
