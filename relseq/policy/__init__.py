# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Acquisition and retention policies for relseq."""

from .retention import deleted_versions, merge_version_order
from .updates import Decision, high_release, is_old_micro, major, should_download

__all__ = [
    "Decision",
    "deleted_versions",
    "high_release",
    "is_old_micro",
    "major",
    "merge_version_order",
    "should_download",
]
