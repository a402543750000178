"""
Application (orchestrator) behavioral tests.

Scope
- End-to-end scenarios: default and named commands, version, help, preview.
- Failure reporting: resolution faults, binding faults, command errors.
- Asynchronous execution and exception propagation.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured with io.StringIO buffers passed to Console.
"""

import asyncio
import io
import unittest
from unittest import TestCase, IsolatedAsyncioTestCase

from helmsman import Application, Command, CommandError, Console, Option, Flag, command, invoke


@command("concat", descr="Concatenates input values.")
class ConcatCommand(Command):
    inputs = Option("-i", nargs="*", required=True, descr="Input values.")
    separator = Option("-s", default="", descr="String separator.")

    def execute(self, console):
        console.write(self.separator.join(self.inputs))


@command
class DefaultConcatCommand(ConcatCommand):
    """Concatenates input values by default."""


@command("div")
class DivideCommand(Command):
    """Divides one number by another."""
    dividend = Option("-D", "--dividend", type=int, required=True)
    divisor = Option("-d", "--divisor", type=int, required=True)

    def execute(self, console):
        console.writeline(self.dividend // self.divisor)


@command("exc")
class FailingCommand(Command):
    message = Option("-m", "--message", default="")

    def execute(self, console):
        raise Exception(self.message)


@command("error")
class ErrorCommand(Command):
    message = Option("-m", "--message", default="")
    code = Option("-c", "--code", type=int, default=1)

    def execute(self, console):
        raise CommandError(self.message, self.code)


@command("sleep")
class SleepCommand(Command):
    loud = Flag("-l", "--loud")

    async def execute(self, console):
        await asyncio.sleep(0)
        console.writeline("AWAKE" if self.loud else "awake")


class Abort(BaseException):
    pass


_SIZES = {"small": 1, "large": 2}


@command("lookup")
class LookupCommand(Command):
    size = Option("-k", "--key", type=_SIZES.__getitem__)

    def execute(self, console):
        console.writeline(self.size)


@command("abort")
class AbortCommand(Command):
    def execute(self, console):
        raise Abort()


def _application(*commands, **options):
    stdout, stderr = io.StringIO(), io.StringIO()
    application = Application(
        commands,
        title="tester",
        executable="tester",
        version="v1.0",
        console=Console(stdout, stderr, colorful=False),
        colorful=False,
        **options
    )
    return application, stdout, stderr


class TestApplicationScenarios(TestCase):
    """Successful invocations."""

    def testDefaultCommandWithRepeatedSequenceOption(self):
        application, stdout, stderr = _application(DefaultConcatCommand)
        self.assertEqual(application.run(["-i", "foo", "-i", "bar", "-s", " "]), 0)
        self.assertEqual(stdout.getvalue(), "foo bar")
        self.assertEqual(stderr.getvalue(), "")

    def testNamedCommandWithSeveralValues(self):
        application, stdout, stderr = _application(ConcatCommand, DivideCommand)
        self.assertEqual(application.run(["concat", "-i", "one", "two", "three", "-s", ", "]), 0)
        self.assertEqual(stdout.getvalue(), "one, two, three")

    def testDivide(self):
        application, stdout, stderr = _application(ConcatCommand, DivideCommand)
        self.assertEqual(application.run(["div", "-D", "24", "-d", "8"]), 0)
        self.assertEqual(stdout.getvalue().strip(), "3")
        self.assertEqual(stderr.getvalue(), "")

    def testShellLikeString(self):
        application, stdout, stderr = _application(DivideCommand)
        self.assertEqual(application.run("div --dividend 24 --divisor 8"), 0)
        self.assertEqual(stdout.getvalue().strip(), "3")

    def testVersionSkipsBinding(self):
        application, stdout, stderr = _application(DefaultConcatCommand)
        self.assertEqual(application.run(["--version"]), 0)
        self.assertEqual(stdout.getvalue().strip(), "v1.0")
        self.assertEqual(stderr.getvalue(), "")

    def testVersionWithoutDefaultCommand(self):
        application, stdout, stderr = _application(DivideCommand)
        self.assertEqual(application.run(["--version"]), 0)
        self.assertEqual(stdout.getvalue().strip(), "v1.0")

    def testVersionIsUnrecognizedOnNamedCommands(self):
        application, stdout, stderr = _application(DivideCommand)
        self.assertEqual(application.run(["div", "-D", "1", "-d", "1", "--version"]), 1)
        self.assertIn("--version", stderr.getvalue())

    def testHelpOnNamedCommand(self):
        for flag in ("-h", "--help"):
            with self.subTest(flag=flag):
                application, stdout, stderr = _application(DefaultConcatCommand, ConcatCommand, DivideCommand)
                self.assertEqual(application.run(["div", flag]), 0)
                output = stdout.getvalue()
                self.assertIn("Divides one number by another.", output)
                self.assertIn("tester div [options]", output)
                self.assertIn("* -D|--dividend", output)
                self.assertIn("-h|--help", output)
                self.assertNotIn("--version", output)
                self.assertEqual(stderr.getvalue(), "")

    def testHelpOnDefaultCommand(self):
        application, stdout, stderr = _application(DefaultConcatCommand, ConcatCommand, DivideCommand)
        self.assertEqual(application.run(["-h"]), 0)
        output = stdout.getvalue()
        self.assertTrue(output.startswith("tester v1.0"))
        self.assertIn("tester [command] [options]", output)
        self.assertIn("--version", output)
        self.assertIn("Commands", output)
        self.assertIn("concat", output)
        self.assertIn("div", output)
        self.assertIn("You can run `tester [command] --help` to show help on a specific command.", output)

    def testHelpOnUnknownCommandListsRoot(self):
        application, stdout, stderr = _application(ConcatCommand, DivideCommand)
        self.assertEqual(application.run(["non-existing", "--help"]), 0)
        self.assertIn("Commands", stdout.getvalue())
        self.assertIn("div", stdout.getvalue())
        self.assertEqual(stderr.getvalue(), "")

    def testHelpSkipsBinding(self):
        application, stdout, stderr = _application(ConcatCommand)
        self.assertEqual(application.run(["concat", "--bogus", "-h"]), 0)

    def testPreviewShowsResolvedCommandWithoutExecuting(self):
        application, stdout, stderr = _application(ConcatCommand, FailingCommand)
        self.assertEqual(application.run(["concat", "[preview]", "-o", "value"]), 0)
        self.assertIn("concat", stdout.getvalue())
        self.assertIn("-o value", stdout.getvalue())
        self.assertEqual(stderr.getvalue(), "")

        application, stdout, stderr = _application(ConcatCommand, FailingCommand)
        self.assertEqual(application.run(["[preview]", "exc", "-m", "never raised"]), 0)
        self.assertEqual(stderr.getvalue(), "")

    def testUnknownDirectivesAreIgnored(self):
        application, stdout, stderr = _application(DivideCommand)
        self.assertEqual(application.run(["[debug]", "div", "-D", "6", "-d", "3"]), 0)
        self.assertEqual(stdout.getvalue().strip(), "2")

    def testCustomFactory(self):
        created = []

        def factory(descriptor):
            created.append(descriptor.name)
            return descriptor.factory()

        application, stdout, stderr = _application(DivideCommand, factory=factory)
        self.assertEqual(application.run(["div", "-D", "4", "-d", "2"]), 0)
        self.assertEqual(created, ["div"])

    def testInvokeHelper(self):
        stdout, stderr = io.StringIO(), io.StringIO()
        exitcode = invoke(DivideCommand, ["div", "-D", "9", "-d", "3"], console=Console(stdout, stderr))
        self.assertEqual(exitcode, 0)
        self.assertEqual(stdout.getvalue().strip(), "3")

    def testStagesAreLogged(self):
        application, stdout, stderr = _application(DivideCommand)
        with self.assertLogs("helmsman.application", "DEBUG") as logs:
            application.run(["div", "-D", "4", "-d", "2"])
        self.assertTrue(any("resolved" in line for line in logs.output))
        self.assertTrue(any("reported" in line for line in logs.output))


class TestApplicationFailures(TestCase):
    """Failed invocations: exit codes and error stream."""

    def testEmptyRegistryAlwaysFails(self):
        for args in ([], ["concat"], ["--version"], ["-h"], ["[preview]"]):
            with self.subTest(args=args):
                application, stdout, stderr = _application()
                self.assertNotEqual(application.run(args), 0)
                self.assertNotEqual(stderr.getvalue(), "")

    def testUnknownCommandListsCandidates(self):
        application, stdout, stderr = _application(ConcatCommand, DivideCommand)
        self.assertEqual(application.run(["non-existing"]), 1)
        output = stderr.getvalue()
        self.assertIn("unknown command 'non-existing'", output)
        self.assertIn("• concat", output)
        self.assertIn("• div", output)
        self.assertEqual(stdout.getvalue(), "")

    def testMissingCommand(self):
        application, stdout, stderr = _application(ConcatCommand, DivideCommand)
        self.assertEqual(application.run([]), 1)
        self.assertIn("no command specified", stderr.getvalue())

    def testPreviewOfUnknownCommandFails(self):
        application, stdout, stderr = _application(ConcatCommand)
        self.assertEqual(application.run(["[preview]", "nope"]), 1)
        self.assertEqual(stdout.getvalue(), "")

    def testPreviewWithoutDefaultCommandFails(self):
        application, stdout, stderr = _application(ConcatCommand)
        self.assertEqual(application.run(["[preview]"]), 1)
        self.assertIn("no command specified", stderr.getvalue())
        self.assertEqual(stdout.getvalue(), "")

    def testBindingFaultsReportedTogether(self):
        application, stdout, stderr = _application(DivideCommand)
        self.assertEqual(application.run(["div", "-D", "x", "--bogus"]), 1)
        output = stderr.getvalue()
        self.assertIn("3 Errors", output)
        self.assertIn("cannot convert 'x' to int", output)
        self.assertIn("missing required option -d|--divisor", output)
        self.assertIn("unrecognized option --bogus", output)
        self.assertEqual(stdout.getvalue(), "")

    def testLongSpellingOfShortAliasFails(self):
        application, stdout, stderr = _application(DivideCommand)
        self.assertEqual(application.run(["div", "--D", "24", "-d", "2"]), 1)
        output = stderr.getvalue()
        self.assertIn("unrecognized option --D", output)
        self.assertIn("missing required option -D|--dividend", output)
        self.assertEqual(stdout.getvalue(), "")

    def testRequiredSequenceWithoutValues(self):
        application, stdout, stderr = _application(ConcatCommand)
        self.assertEqual(application.run(["concat", "-i", "-s", "+"]), 0)
        self.assertEqual(stdout.getvalue(), "")
        self.assertEqual(stderr.getvalue(), "")

    def testFailingTypeCallableIsReported(self):
        application, stdout, stderr = _application(LookupCommand)
        self.assertEqual(application.run(["lookup", "-k", "zzz"]), 1)
        self.assertIn("cannot convert 'zzz'", stderr.getvalue())
        self.assertEqual(stdout.getvalue(), "")

        application, stdout, stderr = _application(LookupCommand)
        self.assertEqual(application.run(["lookup", "--key", "large"]), 0)
        self.assertEqual(stdout.getvalue().strip(), "2")

    def testGenericExceptionIsReported(self):
        application, stdout, stderr = _application(FailingCommand)
        self.assertEqual(application.run(["exc", "-m", "Kaput"]), 1)
        self.assertIn("Kaput", stderr.getvalue())

    def testGenericExceptionWithoutMessage(self):
        application, stdout, stderr = _application(DivideCommand)
        self.assertEqual(application.run(["div", "-D", "1", "-d", "0"]), 1)
        self.assertIn("division", stderr.getvalue())

    def testCommandErrorMessageAndExitCode(self):
        application, stdout, stderr = _application(ErrorCommand)
        self.assertEqual(application.run(["error", "-m", "foo bar", "-c", "666"]), 666)
        self.assertEqual(stderr.getvalue().strip(), "foo bar")

    def testCommandErrorDefaultExitCode(self):
        application, stdout, stderr = _application(ErrorCommand)
        self.assertEqual(application.run(["error", "-m", "failed"]), 1)
        self.assertEqual(stderr.getvalue().strip(), "failed")

    def testStartupErrorsAreRaised(self):
        with self.assertRaises(ValueError):
            Application([DivideCommand, DivideCommand])
        with self.assertRaises(TypeError):
            Application([object])
        with self.assertRaises(TypeError):
            Application([DivideCommand], version="")


class TestApplicationAsync(IsolatedAsyncioTestCase):
    """Cooperative execution through run_async()."""

    async def testAwaitsAsynchronousCommands(self):
        application, stdout, stderr = _application(SleepCommand)
        self.assertEqual(await application.run_async(["sleep", "--loud"]), 0)
        self.assertEqual(stdout.getvalue().strip(), "AWAKE")

    async def testSynchronousCommandsUnderRunAsync(self):
        application, stdout, stderr = _application(DivideCommand)
        self.assertEqual(await application.run_async(["div", "-D", "10", "-d", "5"]), 0)
        self.assertEqual(stdout.getvalue().strip(), "2")

    async def testConcurrentInvocationsAreIndependent(self):
        application, stdout, stderr = _application(SleepCommand)
        results = await asyncio.gather(*(application.run_async(["sleep"]) for _ in range(3)))
        self.assertEqual(results, [0, 0, 0])
        self.assertEqual(stdout.getvalue().split(), ["awake"] * 3)

    async def testBaseExceptionsPropagate(self):
        application, stdout, stderr = _application(AbortCommand)
        with self.assertRaises(Abort):
            await application.run_async(["abort"])


if __name__ == "__main__":
    unittest.main()
