"""Pytest fixtures and configuration for crashlogs tests.

Provides sample crash reports in the desktop (x86_64) and mobile (arm64)
layouts written by ReportCrash, a fake filesystem laid out like a Mac with
synced iOS devices, and an HTTP client bound to the FastAPI app.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from crashlogs.config import Settings, get_settings
from crashlogs.services.users import UserAccount

APPLICATION_CRASH_REPORT = """\
Process:               Calculator [4321]
Path:                  /Applications/Calculator.app/Contents/MacOS/Calculator
Identifier:            com.apple.calculator
Version:               10.16 (197)
Code Type:             X86-64 (Native)
Parent Process:        launchd [1]
Responsible:           Calculator [4321]
User ID:               501

Date/Time:             2024-01-02 03:04:05.678 +0000
OS Version:            macOS 11.2.3 (20D91)
Report Version:        12

Crashed Thread:        0  Dispatch queue: com.apple.main-thread

Exception Type:        EXC_BAD_ACCESS (SIGSEGV)
Exception Codes:       KERN_INVALID_ADDRESS at 0x0000000000000010
Exception Note:        EXC_CORPSE_NOTIFY

Thread 0 Crashed:: Dispatch queue: com.apple.main-thread
0   libobjc.A.dylib                 0x00007fff2018d4af objc_msgSend + 47
1   com.apple.AppKit                0x00007fff22f0a1b2 -[NSApplication run] + 586

Thread 1:
0   libsystem_kernel.dylib          0x00007fff20307e7e __workq_kernreturn + 10

Thread 0 crashed with X86 Thread State (64-bit):
  rax: 0x0000000000000000  rbx: 0x0000600000c04000  rcx: 0x0000000000000010  rdx: 0x0000000000000000
  rdi: 0x0000600000c04000  rsi: 0x00007fff7b7c9e30  rbp: 0x00007ffee3b0e9f0  rsp: 0x00007ffee3b0e9d8
   r8: 0x0000000000000000   r9: 0x0000000000000000  r10: 0x0000000000000000  r11: 0x0000000000000246
"""

MOBILE_CRASH_REPORT = """\
Incident Identifier: 6E0D7A2B-1F3C-4C5E-9A61-0D1B2C3D4E5F
Hardware Model:      iPhone12,1
Process:             MobileSafari [812]
Path:                /Applications/MobileSafari.app/MobileSafari
Identifier:          com.apple.mobilesafari
Version:             8614.1.25.0.31 (8614.1.25.0.31)
Parent Process:      launchd [1]

Date/Time:           2023-05-06 07:08:09.1234 -0700
OS Version:          iPhone OS 16.4.1 (20E252)

Exception Type:  EXC_CRASH (SIGABRT)
Exception Codes: 0x0000000000000000, 0x0000000000000000
Triggered by Thread:  2

Thread 0:
0   libsystem_kernel.dylib          0x00000001bb1f2b48 mach_msg_trap + 8

Thread 2 name:  Dispatch queue: com.apple.WebKit
Thread 2 Crashed:
0   libsystem_kernel.dylib          0x00000001bb213414 __pthread_kill + 8
1   libsystem_pthread.dylib         0x00000001d8d3eb40 pthread_kill + 272

Thread 2 crashed with ARM Thread State (64-bit):
    x0: 0x0000000000000000   x1: 0x0000000000000000   x2: 0x0000000000000000   x3: 0x0000000000000000
    x4: 0x0000000000000000   x5: 0x0000000000000001   x6: 0x0000000000000000   x7: 0x0000000000000000
    x8: 0x0000000000000148   x9: 0x00000001f5a0e6c8  x10: 0x0000000000000000  x11: 0x0000000000000000
"""


# =============================================================================
# Crash Report Fixtures
# =============================================================================


@pytest.fixture
def application_report() -> str:
    """Desktop crash report text."""
    return APPLICATION_CRASH_REPORT


@pytest.fixture
def mobile_report() -> str:
    """Mobile device crash report text."""
    return MOBILE_CRASH_REPORT


# =============================================================================
# Filesystem Fixtures
# =============================================================================


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings whose system-wide directory lives under tmp_path."""
    return Settings(
        app_name="crashlogs-test",
        debug=True,
        system_root=str(tmp_path / "system"),
    )


@pytest.fixture
def mac_tree(tmp_path: Path, test_settings: Settings) -> dict[str, Path]:
    """Lay out system, user and mobile device crash report directories.

    Contents:
        system:  Finder.crash, Finder_LowBattery.crash, notes.txt
        alice:   Calculator.crash, mobile devices iPhone-A (MobileSafari.crash)
                 and iPad-B (Mail.crash, LowBatteryLog.crash)
        bob:     nothing (no Library directory at all)
    """
    system_dir = tmp_path / "system" / "Library/Logs/DiagnosticReports"
    system_dir.mkdir(parents=True)
    (system_dir / "Finder.crash").write_text(APPLICATION_CRASH_REPORT)
    (system_dir / "Finder_LowBattery.crash").write_text(APPLICATION_CRASH_REPORT)
    (system_dir / "notes.txt").write_text("not a crash report")

    alice_home = tmp_path / "Users" / "alice"
    alice_reports = alice_home / "Library/Logs/DiagnosticReports"
    alice_reports.mkdir(parents=True)
    (alice_reports / "Calculator.crash").write_text(APPLICATION_CRASH_REPORT)

    mobile_root = alice_home / "Library/Logs/CrashReporter/MobileDevice"
    iphone = mobile_root / "iPhone-A"
    ipad = mobile_root / "iPad-B"
    iphone.mkdir(parents=True)
    ipad.mkdir(parents=True)
    (iphone / "MobileSafari.crash").write_text(MOBILE_CRASH_REPORT)
    (ipad / "Mail.crash").write_text(MOBILE_CRASH_REPORT)
    (ipad / "LowBatteryLog.crash").write_text(MOBILE_CRASH_REPORT)

    bob_home = tmp_path / "Users" / "bob"
    bob_home.mkdir(parents=True)

    return {
        "system": system_dir,
        "alice": alice_home,
        "bob": bob_home,
        "iphone": iphone,
        "ipad": ipad,
    }


@pytest.fixture
def test_users(mac_tree: dict[str, Path]) -> list[UserAccount]:
    """Accounts whose homes are in the fake tree."""
    return [
        UserAccount(uid=501, username="alice", directory=str(mac_tree["alice"])),
        UserAccount(uid=502, username="bob", directory=str(mac_tree["bob"])),
    ]


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """Create test FastAPI application with overridden settings."""
    from crashlogs.main import app as main_app

    def override_get_settings():
        return test_settings

    main_app.dependency_overrides[get_settings] = override_get_settings

    yield main_app

    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
