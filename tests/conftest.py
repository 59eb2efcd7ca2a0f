from typing import Iterable

import pytest
from google.protobuf import descriptor_pb2, text_format
from google.protobuf.compiler import plugin_pb2

from protoc_gen_tstypes.parser import parse_request

MONEY_PROTO = """
name: "common/money.proto"
package: "common"
message_type {
  name: "Money"
  field { name: "units" number: 1 label: LABEL_OPTIONAL type: TYPE_INT64 }
  field { name: "currency" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING }
}
enum_type {
  name: "Currency"
  value { name: "EUR" number: 0 }
  value { name: "USD" number: 1 }
}
"""

ORDER_PROTO = """
name: "shop/order.proto"
package: "shop"
dependency: "common/money.proto"
enum_type {
  name: "Color"
  value { name: "RED" number: 0 }
  value { name: "GREEN" number: 1 }
}
message_type {
  name: "Order"
  field { name: "id" number: 1 label: LABEL_OPTIONAL type: TYPE_INT64 }
  field { name: "tags" number: 2 label: LABEL_REPEATED type: TYPE_STRING }
  field { name: "total" number: 3 label: LABEL_OPTIONAL type: TYPE_MESSAGE type_name: ".common.Money" }
  field { name: "attrs" number: 4 label: LABEL_REPEATED type: TYPE_MESSAGE type_name: ".shop.Order.AttrsEntry" }
  field { name: "status" number: 5 label: LABEL_OPTIONAL type: TYPE_ENUM type_name: ".shop.Order.Status" }
  field { name: "lines" number: 6 label: LABEL_REPEATED type: TYPE_MESSAGE type_name: ".shop.Order.Line" }
  field { name: "color" number: 7 label: LABEL_OPTIONAL type: TYPE_ENUM type_name: ".shop.Color" }
  nested_type {
    name: "AttrsEntry"
    field { name: "key" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
    field { name: "value" number: 2 label: LABEL_OPTIONAL type: TYPE_INT32 }
    options { map_entry: true }
  }
  nested_type {
    name: "Line"
    field { name: "sku" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }
    field { name: "payload" number: 2 label: LABEL_OPTIONAL type: TYPE_BYTES }
  }
  enum_type {
    name: "Status"
    value { name: "OPEN" number: 0 }
    value { name: "CLOSED" number: 3 }
  }
}
service {
  name: "Shop"
  method { name: "GetOrder" input_type: ".shop.Order" output_type: ".shop.Order" }
  method { name: "Watch" input_type: ".shop.Order" output_type: ".shop.Order" server_streaming: true }
  method { name: "Upload" input_type: ".shop.Order" output_type: ".common.Money" client_streaming: true }
  method {
    name: "Chat"
    input_type: ".shop.Order"
    output_type: ".shop.Order"
    client_streaming: true
    server_streaming: true
  }
}
"""


def file_proto(text: str) -> descriptor_pb2.FileDescriptorProto:
    return text_format.Parse(text, descriptor_pb2.FileDescriptorProto())


def make_request(
    protos: Iterable[str],
    files_to_generate: Iterable[str],
    parameter: str = "",
) -> plugin_pb2.CodeGeneratorRequest:
    request = plugin_pb2.CodeGeneratorRequest()
    request.proto_file.extend(file_proto(t) for t in protos)
    request.file_to_generate.extend(files_to_generate)
    request.parameter = parameter
    return request


@pytest.fixture
def shop_request():
    """Parsed request for shop/order.proto and its common/money.proto dependency."""
    return parse_request(make_request([MONEY_PROTO, ORDER_PROTO], ["shop/order.proto"]))


@pytest.fixture
def order_file(shop_request):
    return shop_request.files["shop/order.proto"]
