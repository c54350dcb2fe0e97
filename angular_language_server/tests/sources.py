FOO_COMPONENT = """import { Component, EventEmitter, Input, Output } from '@angular/core';

@Component({
  selector: 'app-foo',
  template: '<div></div>',
})
export class FooComponent {
  @Input() value: string;
  @Output() changed = new EventEmitter<string>();

  title = 'not bound';
}
"""

BAR_COMPONENT = """import { Component, EventEmitter, Input, Output } from '@angular/core';

@Component({ templateUrl: './bar.component.html', selector: "app-bar" })
class BarComponent {
  @Output() closed = new EventEmitter<void>();
  @Input() first: number;
  @Input() second: number;
}
"""

PLAIN_SOURCE = """export class NotAComponent {
  @Input() ignored: string;
}

export function helper() {
  return 1;
}
"""

