import logging
from dataclasses import dataclass, field
from typing import List, Optional

from installer_core.constants import LOGGER_NAME, PACING_SHORT
from installer_core.install_mapping import DispatchResult, InstallPolicy, InstallProcedure, dispatch
from installer_core.procedure_steps import StepResult

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class InstallReport:
    dispatch: DispatchResult
    procedure: Optional[InstallProcedure] = None
    results: List[StepResult] = field(default_factory=list)
    succeeded: bool = False
    used_fallback: bool = False

    @property
    def agent(self):
        return self.procedure.agent if self.procedure else None

    @property
    def warnings(self):
        return [result for result in self.results if not result.ok and not result.fatal]


class AgentInstaller:

    def __init__(self, policy: InstallPolicy, display):
        self.policy = policy
        self.display = display

    def install(self, profile) -> InstallReport:
        """
        Dispatches the profile through the policy mapping and runs the selected
        procedure, then the policy fallback if the procedure fails fatally.
        Nothing runs unless a procedure was selected.
        """
        dispatch_result = dispatch(profile, self.policy)
        report = InstallReport(dispatch_result)
        if not dispatch_result.selected:
            logger.warning(f"No install procedure for {profile}: {dispatch_result.status.value}")
            return report

        primary = dispatch_result.procedure
        logger.info(f"Installing {primary.agent.package_name} using policy '{self.policy.name}'")
        installed, results = self.run_procedure(primary)
        report.results.extend(results)
        if installed:
            report.procedure = primary
            report.succeeded = True
            return report

        fallback = self.policy.fallback
        if fallback is None:
            self.display.error(f"Installation of {primary.agent.display_name} failed")
            return report

        self.display.warning(f"{primary.name} failed, falling back to {fallback.name}")
        report.used_fallback = True
        installed, results = self.run_procedure(fallback)
        report.results.extend(results)
        if installed:
            report.procedure = fallback
            report.succeeded = True
        else:
            self.display.error("Both the primary and the fallback installation failed")
        return report

    def run_procedure(self, procedure: InstallProcedure):
        self.display.box(f"Installing {procedure.agent.display_name}: {procedure.name}")
        results = []
        failure = None
        with self.display.progress(len(procedure.steps)) as progress:
            for step in procedure.steps:
                progress.start(step.description)
                self.display.pause(PACING_SHORT)
                result = step.run()
                results.append(result)
                progress.advance()
                if result.ok:
                    logger.debug(f"Step '{step.description}' completed{' (skipped)' if result.skipped else ''}")
                    continue
                if step.fatal:
                    failure = result
                    break
                self.display.warning(f"{step.description} reported a problem: {result.message}")

        if failure is not None:
            self.display.error(f"{failure.description} failed: {failure.message}")
            return False, results
        self.display.success(f"{procedure.agent.display_name} installed successfully ({procedure.name})")
        return True, results
