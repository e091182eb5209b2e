import os
import json
import platform
import subprocess
import logging
from .models import OperationStatus

logger = logging.getLogger(__name__)


def _startupinfo():
    if platform.system() != 'Windows': return None
    si = subprocess.STARTUPINFO(); si.dwFlags |= subprocess.STARTF_USESHOWWINDOW; si.wShowWindow = subprocess.SW_HIDE
    return si


def is_ffmpeg_available(ffmpeg_path="ffmpeg"):
    try:
        subprocess.run([ffmpeg_path, '-version'], check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE, startupinfo=_startupinfo())
    except (OSError, subprocess.CalledProcessError) as e:
        logger.error("ffmpeg not found or not executable", extra={"event": "ffmpeg_missing", "context": {"path": ffmpeg_path, "error": str(e)}})
        return False
    return True


def probe_duration(file_path, ffprobe_path="ffprobe"):
    """Duration in seconds from ffprobe, or None when it cannot be read."""
    if not file_path or not os.path.exists(file_path): return None
    command = [ffprobe_path, '-v', 'quiet', '-print_format', 'json', '-show_format', file_path]
    try:
        process = subprocess.run(command, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, encoding='utf-8', startupinfo=_startupinfo())
        return float(json.loads(process.stdout)['format']['duration'])
    except (OSError, subprocess.CalledProcessError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Could not read duration", extra={"event": "probe_failed", "context": {"path": file_path, "error": str(e)}})
        return None


def build_cut_command(source_path, start, end, output_path, ffmpeg_path="ffmpeg"):
    duration = end - start
    return [ffmpeg_path, '-hide_banner', '-loglevel', 'error',
            '-ss', f"{start:.3f}", '-i', source_path, '-t', f"{duration:.3f}",
            '-c', 'copy', '-map', '0', '-avoid_negative_ts', 'make_zero',
            '-n', output_path]


def cut(source_path, start, end, output_path, ffmpeg_path="ffmpeg"):
    """Stream-copy [start, end) of source_path into output_path.

    The outcome comes from ffmpeg's exit status only; the source is never
    modified. No timeout is applied, a hung ffmpeg blocks the caller.
    """
    cmd = build_cut_command(source_path, start, end, output_path, ffmpeg_path)
    logger.info("Running ffmpeg cut", extra={"event": "cut_start", "context": {"command": cmd}})
    try:
        proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, encoding='utf-8', errors='replace', startupinfo=_startupinfo())
        _, stderr = proc.communicate()
    except OSError as e:
        logger.error("Could not start ffmpeg", extra={"event": "cut_spawn_failed", "context": {"path": ffmpeg_path, "error": str(e)}})
        return OperationStatus.FAILED
    if proc.returncode == 0:
        logger.info("Cut completed", extra={"event": "cut_completed", "context": {"output": output_path, "exists": os.path.exists(output_path)}})
        return OperationStatus.COMPLETED
    logger.warning("ffmpeg failed", extra={"event": "cut_failed", "context": {"returncode": proc.returncode, "stderr": (stderr or "")[-500:]}})
    return OperationStatus.FAILED
