# This file is part of the rover project
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# version 2 of the GNU General Public License.
#
# See the LICENSE file in the source distribution for further information.

import errno
import hashlib
import os
import tarfile
from datetime import datetime

from rover import _rover as _
from rover.component import RoverComponent
from rover.utilities import get_hostname

# file system errors that should terminate a run
fatal_fs_errors = (errno.ENOSPC, errno.EROFS)


class RoverArchive(RoverComponent):
    """Pack the collected output of this host into a compressed tarball"""

    desc = "Archive collected command output for this host"
    help_text = """
Usage: rover archive
\tPack the collected output of this host into a compressed tarball
\tand write a checksum file next to it
"""
    config_section = "archive"

    arg_defaults = {
        "hash_name": "sha256",
    }

    def __init__(self, parser, args, cmdline):
        super().__init__(parser, args, cmdline)
        self.host_name = get_hostname()

    def _archive_name(self):
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        return f"rover-{self.host_name}-{stamp}.tar.gz"

    def _create_archive(self, source):
        archive = os.path.join(self.opts.outdir, self._archive_name())
        self.roverlog.info(f"[archive] packing {source} into {archive}")
        old_umask = os.umask(0o077)
        try:
            with tarfile.open(archive, "w:gz") as tar:
                tar.add(source, arcname=os.path.basename(source))
        finally:
            os.umask(old_umask)
        return archive

    def _create_checksum(self, archive, hash_name):
        if not archive:
            return False

        try:
            hash_size = 1024**2
            digest = hashlib.new(hash_name)
            with open(archive, "rb") as archive_fp:
                while True:
                    hashdata = archive_fp.read(hash_size)
                    if not hashdata:
                        break
                    digest.update(hashdata)
        except (OSError, ValueError):
            self.roverlog.exception("Error generating checksum")
            return None
        return digest.hexdigest()

    def _write_checksum(self, archive, hash_name, checksum):
        try:
            with open(archive + "." + hash_name, "w", encoding="utf-8") as fp:
                if checksum:
                    fp.write(checksum + "\n")
        except OSError:
            self.roverlog.exception("Error writing checksum file")

    def display_results(self, archive, checksum, archivestat):
        self.ui_log.info(_(f"\nYour rover archive has been generated and "
                           f"saved in:\n\t{archive}\n"))
        self.ui_log.info(_(f" Size\t{archivestat.st_size}"))
        if checksum:
            self.ui_log.info(_(f" {self.opts.hash_name}\t{checksum}"))
        self.ui_log.info("")

    def execute(self):
        source = os.path.join(self.opts.outdir, self.host_name)
        if not os.path.isdir(source):
            self._exit(1, _(f"No collected output found at {source}, run a "
                            "rover module first"))

        try:
            archive = self._create_archive(source)
        except OSError as e:
            if e.errno in fatal_fs_errors:
                self._exit(1, _(f" {e.strerror} while creating archive"))
            self._exit(1, _(f"Error creating archive: {e}"))
        except tarfile.TarError as e:
            self._exit(1, _(f"Error creating archive: {e}"))

        checksum = self._create_checksum(archive, self.opts.hash_name)
        if checksum:
            self._write_checksum(archive, self.opts.hash_name, checksum)
        else:
            self.ui_log.error(_("Error generating archive checksum after "
                                "archive creation."))

        self.display_results(archive, checksum, os.stat(archive))
        return 0
