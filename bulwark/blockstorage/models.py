# Copyright 2026 The Bulwark Authors.
# All Rights Reserved.
#
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

"""Values exchanged through the storage provider contract.

Volumes and snapshots are point-in-time copies of backend state built
fresh from every describe call. Sizes are always in bytes.

"""


class _Model(object):

    _fields = ()

    def __init__(self, **kwargs):
        for field in self._fields:
            setattr(self, field, kwargs.pop(field, None))
        if kwargs:
            raise TypeError("Unexpected fields for %(model)s: %(fields)s" %
                            {'model': type(self).__name__,
                             'fields': ', '.join(sorted(kwargs))})

    def to_dict(self):
        return {field: getattr(self, field) for field in self._fields}

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return '%s(%s)' % (
            type(self).__name__,
            ', '.join('%s=%r' % (field, getattr(self, field))
                      for field in self._fields))


class KeyValue(_Model):
    _fields = ('key', 'value')


class ObjectReference(_Model):
    """Pointer to an externally managed object, such as a secret."""
    _fields = ('api_version', 'kind', 'name', 'namespace')


class MountTarget(_Model):
    """Network attachment point of a file system."""
    _fields = ('subnet_id', 'security_groups')

    def __init__(self, **kwargs):
        super(MountTarget, self).__init__(**kwargs)
        self.security_groups = list(self.security_groups or [])


class Volume(_Model):
    _fields = ('type', 'id', 'az', 'region', 'size', 'encrypted',
               'volume_type', 'iops', 'creation_time', 'tags')

    def __init__(self, **kwargs):
        super(Volume, self).__init__(**kwargs)
        self.encrypted = bool(self.encrypted)
        if self.tags is not None:
            self.tags = map_to_key_value(key_value_to_map(self.tags))


class Snapshot(_Model):
    _fields = ('type', 'id', 'region', 'size', 'encrypted', 'creation_time',
               'tags', 'volume')

    def __init__(self, **kwargs):
        super(Snapshot, self).__init__(**kwargs)
        self.encrypted = bool(self.encrypted)
        if self.tags is not None:
            self.tags = map_to_key_value(key_value_to_map(self.tags))


def key_value_to_map(key_values):
    """Convert a list of KeyValue into a dict; later keys overwrite."""
    return {kv.key: kv.value for kv in key_values or []}


def map_to_key_value(tags):
    """Convert a dict into a list of KeyValue ordered by key."""
    return [KeyValue(key=k, value=v) for k, v in sorted((tags or {}).items())]
